"""
Modèle SQLAlchemy pour les comptes (administrateurs et écoles).
Un compte Staff représente une école : il porte son code et son district.
"""

from sqlalchemy import Column, DateTime, Integer, String, func

from ticketing.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # Admin, Staff
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    school = Column(String(255), nullable=True)
    school_code = Column(String(50), nullable=True)
    district = Column(String(100), nullable=True)
    address = Column(String(255), nullable=True)
    principal = Column(String(255), nullable=True)
    contact_number = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

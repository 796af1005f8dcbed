"""
Modèle SQLAlchemy du catalogue de problèmes (sous-catégories proposées sur un ticket).
"""

from sqlalchemy import Column, Integer, String

from ticketing.database import Base


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    category = Column(String(20), nullable=False)  # Hardware, Software

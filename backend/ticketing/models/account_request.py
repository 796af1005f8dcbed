"""
Modèles SQLAlchemy pour les demandes de création et de réinitialisation de compte DepEd.
Les deux workflows partagent les mêmes statuts et le même principe de numérotation.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from ticketing.database import Base


class AccountRequest(Base):
    __tablename__ = "account_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_number = Column(String(30), unique=True, nullable=False)  # Ex: "REQ-AB12345612345"
    selected_type = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    surname = Column(String(100), nullable=False)
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=False, default="")
    designation = Column(String(255), nullable=False)
    school = Column(String(255), nullable=False)
    school_id = Column(String(50), nullable=False)
    personal_gmail = Column(String(255), nullable=False)
    proof_of_identity = Column(String(255), nullable=False)
    prc_id = Column(String(255), nullable=False)
    endorsement_letter = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="Pending")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime, nullable=True)


class AccountResetRequest(Base):
    __tablename__ = "account_reset_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reset_number = Column(String(30), unique=True, nullable=False)  # Ex: "RST-ABC1234123456"
    selected_type = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    surname = Column(String(100), nullable=False)
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=False, default="")
    school = Column(String(255), nullable=False)
    school_id = Column(String(50), nullable=False)
    employee_number = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="Pending")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime, nullable=True)


class IdasResetRequest(Base):
    """Demande de réinitialisation du mot de passe IDAS, soumise par un compte école."""
    __tablename__ = "idas_reset_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    school = Column(String(255), nullable=False)
    school_id = Column(String(50), nullable=False)
    employee_number = Column(String(50), nullable=False)
    requested_by = Column(String(100), nullable=False)  # username du compte école
    created_at = Column(DateTime, server_default=func.now())

"""
Schémas Pydantic pour les demandes de compte DepEd et de réinitialisation.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from ticketing.models.enums import RequestStatus, parse_enum


class AccountRequestSubmission(BaseModel):
    """Champs texte d'une demande de création (les trois justificatifs arrivent en fichiers)."""
    selected_type: str
    surname: str
    first_name: str
    middle_name: Optional[str] = None
    designation: str
    school: str
    school_id: str
    personal_gmail: EmailStr

    @field_validator("selected_type", "surname", "first_name", "designation", "school", "school_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class ResetRequestCreate(BaseModel):
    selected_type: str
    surname: str
    first_name: str
    middle_name: Optional[str] = None
    school: str
    school_id: str
    employee_number: str

    @field_validator("selected_type", "surname", "first_name", "school", "school_id", "employee_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class RequestStatusUpdate(BaseModel):
    status: RequestStatus
    notes: Optional[str] = None  # motif de rejet ou remarque libre

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str):
            return parse_enum(RequestStatus, v)
        return v


class AccountRequestCreated(BaseModel):
    request_id: int
    request_number: str


class ResetRequestCreated(BaseModel):
    request_id: int
    reset_number: str


class AccountRequestResponse(BaseModel):
    id: int
    request_number: str
    selected_type: str
    name: str
    surname: str
    first_name: str
    middle_name: str
    designation: str
    school: str
    school_id: str
    personal_gmail: str
    proof_of_identity: str
    prc_id: str
    endorsement_letter: str
    status: str
    notes: Optional[str]
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ResetRequestResponse(BaseModel):
    id: int
    reset_number: str
    selected_type: str
    name: str
    surname: str
    first_name: str
    middle_name: str
    school: str
    school_id: str
    employee_number: str
    status: str
    notes: Optional[str]
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

    model_config = {"from_attributes": True}


class TransactionStatus(BaseModel):
    """Suivi public d'une demande à partir de son numéro REQ- / RST-."""
    kind: str  # account_request, reset_request
    number: str
    name: str
    school: str
    status: str
    notes: Optional[str] = None


class IdasResetSubmission(BaseModel):
    """
    Formulaire IDAS de l'écran de réinitialisation côté école.
    Tous les champs sont optionnels ici : les manquants sont rapportés ensemble par le service.
    """
    name: Optional[str] = None
    school: Optional[str] = None
    school_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("school_id", "schoolId"))
    employee_number: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("employee_number", "employeeNumber")
    )


class IdasResetResponse(BaseModel):
    id: int
    name: str
    school: str
    school_id: str
    employee_number: str
    requested_by: str
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}

"""
Schémas Pydantic pour les comptes école (role Staff).
"""

from typing import Optional

from pydantic import BaseModel, field_validator


class SchoolCreate(BaseModel):
    username: str
    password: str
    district: str
    school_code: str
    school: str
    address: Optional[str] = None
    principal: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None

    @field_validator("username", "password", "district", "school_code", "school")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class SchoolResponse(BaseModel):
    id: int
    username: str
    school: Optional[str]
    school_code: Optional[str]
    district: Optional[str]

    model_config = {"from_attributes": True}


class SchoolDirectoryEntry(BaseModel):
    school_code: Optional[str]
    school: Optional[str]


class SchoolPasswordReset(BaseModel):
    school: str

    @field_validator("school")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'école est obligatoire.")
        return v.strip()

"""
Schémas Pydantic pour l'authentification et les comptes.
"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ticketing.models.enums import Role


class TokenClaims(BaseModel):
    """Claims portés par le jeton : identité, rôle et école du compte."""
    id: int
    username: str
    role: Role
    school: Optional[str] = None
    school_code: Optional[str] = None
    district: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = {"from_attributes": True, "use_enum_values": True}


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nom d'utilisateur et mot de passe obligatoires.")
        return v


class LoginResponse(BaseModel):
    token: str
    user: TokenClaims


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def new_password_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nouveau mot de passe ne peut pas être vide.")
        return v


class MessageResponse(BaseModel):
    message: str

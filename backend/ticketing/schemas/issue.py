"""
Schémas Pydantic du catalogue de problèmes.
"""

from pydantic import BaseModel, field_validator

from ticketing.models.enums import TicketCategory, parse_enum


class IssueCreate(BaseModel):
    name: str
    category: TicketCategory

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du problème est obligatoire.")
        return v.strip()

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, v):
        if isinstance(v, str):
            return parse_enum(TicketCategory, v)
        return v


class IssueResponse(BaseModel):
    id: int
    name: str
    category: str

    model_config = {"from_attributes": True}

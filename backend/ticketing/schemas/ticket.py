"""
Schémas Pydantic pour les tickets de support.

La création arrive en multipart (formulaire + pièces jointes) : elle est validée
dans ticket_service.build_ticket_submission plutôt que par un modèle Pydantic.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ticketing.models.enums import TicketStatus, parse_enum


class DeviceSelection(BaseModel):
    """
    Appareil du lot visé par le ticket, identifié par son numéro de série.
    Le formulaire envoie selectedDevices en JSON camelCase (serialNumber, issueDescription).
    """
    serial_number: str = Field(validation_alias=AliasChoices("serial_number", "serialNumber", "deviceId"))
    issue_description: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("issue_description", "issueDescription", "description"),
    )


class TicketSubmission(BaseModel):
    """Données de création validées (hors fichiers)."""
    requestor: str
    category: str
    request: str
    comments: Optional[str] = None
    batch_id: Optional[int] = None
    devices: List[DeviceSelection] = []


class TicketCreated(BaseModel):
    ticket_id: int
    ticket_number: str
    linked_devices: int = 0
    skipped_serials: List[str] = []


class TicketStatusUpdate(BaseModel):
    status: TicketStatus

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str):
            return parse_enum(TicketStatus, v)
        return v


class TicketResponse(BaseModel):
    id: int
    ticket_number: str
    requestor: str
    category: str
    request: str
    comments: Optional[str]
    attachments: List[str] = []
    status: str
    batch_id: Optional[int]
    archived: bool
    created_at: Optional[datetime]
    closed_at: Optional[datetime]

    model_config = {"from_attributes": True}


class TicketDeviceView(BaseModel):
    """Ligne de la vue ticket → appareil → lot."""
    ticket_number: str
    requestor: str
    batch_id: int
    batch_number: str
    device_type: str
    serial_number: str
    issue_description: str

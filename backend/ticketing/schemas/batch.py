"""
Schémas Pydantic pour les lots d'appareils.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


class DeviceIn(BaseModel):
    """Appareil déclaré à la création d'un lot."""
    device_type: str
    serial_number: str

    @field_validator("device_type", "serial_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le type et le numéro de série de l'appareil sont obligatoires.")
        return v.strip()


class BatchCreate(BaseModel):
    school_code: str
    school_name: str
    send_date: date
    devices: List[DeviceIn]

    @field_validator("school_code", "school_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code et le nom de l'école sont obligatoires.")
        return v.strip()

    @field_validator("devices")
    @classmethod
    def at_least_one_device(cls, v: List[DeviceIn]) -> List[DeviceIn]:
        if not v:
            raise ValueError("Au moins un appareil doit être déclaré.")
        return v


class BatchDeviceResponse(BaseModel):
    device_type: str
    serial_number: str

    model_config = {"from_attributes": True}


class BatchResponse(BaseModel):
    id: int
    batch_number: str
    school_code: str
    school_name: str
    send_date: date
    status: str
    received_date: Optional[date]
    cancelled_date: Optional[date]
    device_count: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BatchCreated(BaseModel):
    """Réponse de création : identifiant, numéro et statut initial."""
    batch_id: int
    batch_number: str
    status: str
    received_date: Optional[date]
    device_count: int


class NextBatchNumber(BaseModel):
    next_batch_number: str


class DeviceTypeCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du type d'appareil est obligatoire.")
        return v.strip()


class DeviceTypeResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}

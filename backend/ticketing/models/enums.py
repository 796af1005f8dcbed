"""
Énumérations fermées des statuts et catégories.
Stockées en base sous leur valeur texte (colonnes String).
"""

from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    STAFF = "Staff"


class TicketCategory(str, Enum):
    HARDWARE = "Hardware"
    SOFTWARE = "Software"


class TicketStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class BatchStatus(str, Enum):
    PENDING = "Pending"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class RequestStatus(str, Enum):
    """Statuts partagés par les demandes de compte et de réinitialisation."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


def parse_enum(enum_cls, raw: str):
    """
    Retrouve le membre d'une énumération à partir de sa valeur, sans tenir compte de la casse.
    Lève ValueError si la valeur est inconnue.
    """
    wanted = raw.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Valeur invalide '{raw}'. Valeurs acceptées : {allowed}")

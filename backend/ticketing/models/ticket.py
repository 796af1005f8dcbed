"""
Modèles SQLAlchemy pour les tickets de support et leur lien vers les appareils d'un lot.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from ticketing.database import Base


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_number = Column(String(20), unique=True, nullable=False)
    requestor = Column(String(100), nullable=False, index=True)  # username du compte école
    category = Column(String(20), nullable=False)                # Hardware, Software
    request = Column(Text, nullable=False)
    comments = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=False, default=list)     # noms de fichiers générés
    status = Column(String(20), nullable=False, default="Pending")
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    closed_at = Column(DateTime, nullable=True)                  # renseigné ssi status = Completed


class TicketDevice(Base):
    """
    Association ticket ↔ appareil d'un lot.
    Supprimée avec le ticket ; un appareil référencé bloque la suppression de son lot.
    """
    __tablename__ = "ticket_devices"
    __table_args__ = (UniqueConstraint("ticket_id", "batch_device_id", name="uq_ticket_device"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    batch_device_id = Column(
        Integer, ForeignKey("batch_devices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    issue_description = Column(Text, nullable=False)

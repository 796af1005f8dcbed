"""
Modèles SQLAlchemy pour les lots d'appareils envoyés aux écoles.
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, func

from ticketing.database import Base


class Batch(Base):
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_number = Column(String(20), unique=True, nullable=False)  # Ex: "20240101-0001"
    school_code = Column(String(50), nullable=False, index=True)
    school_name = Column(String(255), nullable=False)
    send_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="Pending")  # Pending, Delivered, Cancelled
    received_date = Column(Date, nullable=True)
    cancelled_date = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class BatchDevice(Base):
    """Appareil physique appartenant à un lot. Le numéro de série est unique dans tout le système."""
    __tablename__ = "batch_devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    device_type = Column(String(100), nullable=False)
    serial_number = Column(String(100), unique=True, nullable=False)


class DeviceType(Base):
    """Catalogue des types d'appareils proposés lors de la composition d'un lot."""
    __tablename__ = "device_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)

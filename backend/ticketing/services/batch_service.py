"""
Service métier pour les lots d'appareils et leurs appareils.

Création d'un lot :
1. Vérifier les numéros de série proposés (doublons dans la requête et en base)
2. Calculer le numéro du jour et le statut initial
3. Insérer le lot, puis ses appareils une fois l'ID du lot connu
4. Committer le tout en une seule transaction (rollback complet en cas d'échec)
"""

import logging
from collections import Counter
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ticketing import clock
from ticketing.exceptions import DuplicateSerialError, ForbiddenError, NotFoundError
from ticketing.models.batch import Batch, BatchDevice
from ticketing.models.enums import Role
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.batch import (
    BatchCreate,
    BatchCreated,
    BatchDeviceResponse,
    BatchResponse,
)
from ticketing.services import numbering
from ticketing.services.list_filter import BATCH_SEARCH_FIELDS, filter_records
from ticketing.services.status_rules import BatchAction, apply_batch_action, initial_batch_status

logger = logging.getLogger(__name__)


def find_duplicate_serials(db: Session, serials: List[str]) -> List[str]:
    """
    Retourne tous les numéros de série en conflit, dans l'ordre de la requête :
    répétés dans la requête elle-même ou déjà enregistrés dans n'importe quel lot.
    """
    counts = Counter(serials)
    existing = set(db.execute(
        select(BatchDevice.serial_number)
        .where(BatchDevice.serial_number.in_(list(counts)))
    ).scalars().all())

    duplicates: List[str] = []
    for serial in serials:
        if (counts[serial] > 1 or serial in existing) and serial not in duplicates:
            duplicates.append(serial)
    return duplicates


def create_batch(db: Session, data: BatchCreate, today: Optional[date] = None) -> BatchCreated:
    """
    Crée un lot et tous ses appareils de façon atomique.

    Lève DuplicateSerialError (liste complète des numéros en conflit) avant toute écriture.
    Une collision de numéro de lot entre deux créations simultanées est absorbée par
    create_with_unique_number (index unique + nouvelle tentative).
    """
    today = today or clock.today()
    serials = [d.serial_number for d in data.devices]

    def attempt() -> BatchCreated:
        duplicates = find_duplicate_serials(db, serials)
        if duplicates:
            raise DuplicateSerialError(duplicates)

        status, received_date = initial_batch_status(data.send_date, today)
        batch = Batch(
            batch_number=numbering.next_batch_number(db, today),
            school_code=data.school_code,
            school_name=data.school_name,
            send_date=data.send_date,
            status=status.value,
            received_date=received_date,
        )
        try:
            db.add(batch)
            db.flush()  # Obtenir l'ID du lot avant d'insérer les appareils

            db.bulk_insert_mappings(BatchDevice, [
                {"batch_id": batch.id, "device_type": d.device_type, "serial_number": d.serial_number}
                for d in data.devices
            ])
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Lot créé : %s pour %s (%s) : %d appareil(s), statut %s",
            batch.batch_number, data.school_name, data.school_code, len(data.devices), status.value,
        )
        return BatchCreated(
            batch_id=batch.id,
            batch_number=batch.batch_number,
            status=status.value,
            received_date=received_date,
            device_count=len(data.devices),
        )

    return numbering.create_with_unique_number(db, attempt, "lot")


def preview_next_batch_number(db: Session, today: Optional[date] = None) -> str:
    """Numéro qu'obtiendrait le prochain lot créé aujourd'hui (indicatif, non réservé)."""
    return numbering.next_batch_number(db, today or clock.today())


def get_batches(
    db: Session,
    user: TokenClaims,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[BatchResponse]:
    """
    Liste les lots, du plus récent envoi au plus ancien.
    Un compte école ne voit que les lots de son école.
    """
    query = select(Batch).order_by(Batch.send_date.desc(), Batch.id.desc())
    if user.role != Role.ADMIN:
        query = query.where(Batch.school_code == user.school_code)
    batches = db.execute(query).scalars().all()

    counts = _device_counts(db, [b.id for b in batches])
    responses = [_to_response(b, counts.get(b.id, 0)) for b in batches]
    return filter_records(responses, status, search, BATCH_SEARCH_FIELDS)


def get_batch(db: Session, batch_id: int) -> BatchResponse:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise NotFoundError("Lot introuvable.")
    return _to_response(batch, _device_counts(db, [batch.id]).get(batch.id, 0))


def receive_batch(db: Session, batch_id: int, user: TokenClaims, today: Optional[date] = None) -> BatchResponse:
    """Réception par l'école destinataire : Pending → Delivered, received_date = aujourd'hui."""
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise NotFoundError("Lot introuvable.")
    if batch.school_code != user.school_code:
        raise ForbiddenError("Ce lot n'est pas destiné à votre école.")

    apply_batch_action(batch, BatchAction.RECEIVE, today or clock.today())
    db.commit()
    db.refresh(batch)
    logger.info("Lot %s reçu par %s", batch.batch_number, user.username)
    return get_batch(db, batch.id)


def cancel_batch(db: Session, batch_id: int, today: Optional[date] = None) -> BatchResponse:
    """Annulation administrateur : Pending → Cancelled, cancelled_date = aujourd'hui. Irréversible."""
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise NotFoundError("Lot introuvable.")

    apply_batch_action(batch, BatchAction.CANCEL, today or clock.today())
    db.commit()
    db.refresh(batch)
    logger.info("Lot %s annulé", batch.batch_number)
    return get_batch(db, batch.id)


def list_devices_for_batch(db: Session, batch_id: int) -> List[BatchDeviceResponse]:
    """Appareils d'un lot triés par type. Une liste vide n'est pas une erreur."""
    devices = db.execute(
        select(BatchDevice)
        .where(BatchDevice.batch_id == batch_id)
        .order_by(BatchDevice.device_type, BatchDevice.id)
    ).scalars().all()
    return [BatchDeviceResponse.model_validate(d) for d in devices]


def _device_counts(db: Session, batch_ids: List[int]) -> dict:
    if not batch_ids:
        return {}
    rows = db.execute(
        select(BatchDevice.batch_id, func.count())
        .where(BatchDevice.batch_id.in_(batch_ids))
        .group_by(BatchDevice.batch_id)
    ).all()
    return {batch_id: count for batch_id, count in rows}


def _to_response(batch: Batch, device_count: int) -> BatchResponse:
    return BatchResponse(
        id=batch.id,
        batch_number=batch.batch_number,
        school_code=batch.school_code,
        school_name=batch.school_name,
        send_date=batch.send_date,
        status=batch.status,
        received_date=batch.received_date,
        cancelled_date=batch.cancelled_date,
        device_count=device_count,
        created_at=batch.created_at,
    )

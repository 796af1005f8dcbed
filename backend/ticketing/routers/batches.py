"""
Router des lots d'appareils livrés aux écoles.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import get_current_user, require_admin, require_staff
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.batch import (
    BatchCreate,
    BatchCreated,
    BatchDeviceResponse,
    BatchResponse,
    NextBatchNumber,
)
from ticketing.services import batch_service

router = APIRouter(prefix="/api/v1/batches", tags=["Lots"])


@router.post("", response_model=BatchCreated, status_code=201, summary="Créer un lot")
def create_batch(
    data: BatchCreate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """
    Crée un lot et ses appareils en une seule transaction.

    - Numéro attribué : AAAAMMJJ-NNNN (séquence du jour)
    - Envoi antérieur à aujourd'hui : lot directement Delivered, reçu à la date d'envoi
    - 409 DuplicateSerial : liste complète des numéros de série déjà utilisés
    """
    return batch_service.create_batch(db, data)


@router.get("", response_model=List[BatchResponse], summary="Lister les lots")
def list_batches(
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
):
    """Administrateur : tous les lots. Compte école : les lots destinés à son école."""
    return batch_service.get_batches(db, user, status, search)


@router.get("/next-number", response_model=NextBatchNumber, summary="Aperçu du prochain numéro de lot")
def next_batch_number(
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """Numéro indicatif : il n'est pas réservé et peut être pris par une autre création."""
    return NextBatchNumber(next_batch_number=batch_service.preview_next_batch_number(db))


@router.put("/{batch_id}/receive", response_model=BatchResponse, summary="Confirmer la réception d'un lot")
def receive_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(require_staff),
):
    return batch_service.receive_batch(db, batch_id, user)


@router.put("/{batch_id}/cancel", response_model=BatchResponse, summary="Annuler un lot")
def cancel_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """Annulation irréversible, possible uniquement pour un lot en attente."""
    return batch_service.cancel_batch(db, batch_id)


@router.get("/{batch_id}/devices", response_model=List[BatchDeviceResponse], summary="Appareils d'un lot")
def list_batch_devices(
    batch_id: int,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(get_current_user),
):
    return batch_service.list_devices_for_batch(db, batch_id)

"""
Router des demandes de réinitialisation de compte DepEd.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import require_admin
from ticketing.schemas.account_request import (
    RequestStatusUpdate,
    ResetRequestCreate,
    ResetRequestCreated,
    ResetRequestResponse,
)
from ticketing.schemas.auth import TokenClaims
from ticketing.services import account_request_service

router = APIRouter(prefix="/api/v1/account-reset-requests", tags=["Demandes de compte"])


@router.post("", response_model=ResetRequestCreated, status_code=201, summary="Soumettre une demande de réinitialisation")
def create_reset_request(data: ResetRequestCreate, db: Session = Depends(get_db)):
    """Enregistre la demande et retourne son numéro RST- pour le suivi."""
    return account_request_service.create_reset_request(db, data)


@router.get("", response_model=List[ResetRequestResponse], summary="Lister les demandes de réinitialisation")
def list_reset_requests(
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return account_request_service.get_reset_requests(db, status, search)


@router.put("/{request_id}/status", response_model=ResetRequestResponse, summary="Changer le statut d'une réinitialisation")
def update_reset_request_status(
    request_id: int,
    data: RequestStatusUpdate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return account_request_service.update_reset_request_status(db, request_id, data)

"""
Router des demandes de réinitialisation IDAS (écran de réinitialisation côté école).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import require_admin, require_staff
from ticketing.schemas.account_request import IdasResetResponse, IdasResetSubmission
from ticketing.schemas.auth import TokenClaims
from ticketing.services import account_request_service

router = APIRouter(prefix="/api/v1/idas-reset-requests", tags=["Demandes de compte"])


@router.post("", response_model=IdasResetResponse, status_code=201, summary="Demander une réinitialisation IDAS")
def create_idas_reset_request(
    data: IdasResetSubmission,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(require_staff),
):
    """Champs : name, school, school_id, employee_number. Les champs manquants sont tous rapportés."""
    return account_request_service.create_idas_reset_request(db, data, user)


@router.get("", response_model=List[IdasResetResponse], summary="Lister les réinitialisations IDAS")
def list_idas_reset_requests(
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return account_request_service.get_idas_reset_requests(db)

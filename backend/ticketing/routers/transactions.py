"""
Router public de suivi d'une demande à partir de son numéro (REQ-... ou RST-...).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.schemas.account_request import TransactionStatus
from ticketing.services import account_request_service

router = APIRouter(prefix="/api/v1/transactions", tags=["Suivi"])


@router.get("/{number}", response_model=TransactionStatus, summary="Suivre une demande")
def get_transaction(number: str, db: Session = Depends(get_db)):
    """
    Retourne le statut et les éventuelles notes de l'administrateur.
    400 si le préfixe n'est ni REQ- ni RST-, 404 si le numéro est inconnu.
    """
    return account_request_service.lookup_transaction(db, number)

"""
Router des comptes école : création, liste par district, annuaire public,
réinitialisation des mots de passe.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import require_admin
from ticketing.schemas.auth import MessageResponse, TokenClaims
from ticketing.schemas.school import (
    SchoolCreate,
    SchoolDirectoryEntry,
    SchoolPasswordReset,
    SchoolResponse,
)
from ticketing.services import school_service

router = APIRouter(prefix="/api/v1/schools", tags=["Écoles"])


@router.post("", response_model=SchoolResponse, status_code=201, summary="Créer un compte école")
def create_school(
    data: SchoolCreate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """Crée un compte Staff rattaché à une école. 409 si le nom d'utilisateur existe déjà."""
    return school_service.create_school(db, data)


@router.get("", response_model=List[SchoolResponse], summary="Lister les comptes école")
def list_schools(
    district: Optional[str] = None,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return school_service.get_schools(db, district)


@router.get("/directory", response_model=List[SchoolDirectoryEntry], summary="Annuaire des écoles")
def school_directory(db: Session = Depends(get_db)):
    """Liste publique (code, nom) utilisée par le formulaire de demande de compte."""
    return school_service.get_school_directory(db)


@router.post("/reset-password", response_model=MessageResponse, summary="Réinitialiser les mots de passe d'une école")
def reset_school_password(
    data: SchoolPasswordReset,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    count = school_service.reset_school_password(db, data.school)
    return MessageResponse(message=f"{count} compte(s) réinitialisé(s) pour {data.school}.")

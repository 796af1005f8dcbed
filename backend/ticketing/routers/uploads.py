"""
Router de consultation des fichiers stockés (pièces jointes et justificatifs).
Les fichiers sont servis par leur nom généré ; aucun chemin n'est accepté.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ticketing.config import settings
from ticketing.dependencies import get_current_user, require_admin
from ticketing.schemas.auth import TokenClaims
from ticketing.services.file_storage import resolve_stored_file

router = APIRouter(prefix="/api/v1", tags=["Fichiers"])


@router.get("/uploads/{filename}", summary="Télécharger une pièce jointe de ticket")
def get_ticket_attachment(filename: str, _: TokenClaims = Depends(get_current_user)):
    return FileResponse(resolve_stored_file(filename, settings.UPLOAD_DIR))


@router.get("/account-uploads/{filename}", summary="Télécharger un justificatif de demande de compte")
def get_account_document(filename: str, _: TokenClaims = Depends(require_admin)):
    return FileResponse(resolve_stored_file(filename, settings.ACCOUNT_UPLOAD_DIR))

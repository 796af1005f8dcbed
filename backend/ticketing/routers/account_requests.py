"""
Router des demandes de création de compte DepEd.
Soumission publique (multipart, 3 justificatifs), traitement par l'administrateur.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.database import get_db
from ticketing.dependencies import require_admin
from ticketing.schemas.account_request import (
    AccountRequestCreated,
    AccountRequestResponse,
    RequestStatusUpdate,
)
from ticketing.schemas.auth import TokenClaims
from ticketing.services import account_request_service, file_storage

router = APIRouter(prefix="/api/v1/account-requests", tags=["Demandes de compte"])


@router.post("", response_model=AccountRequestCreated, status_code=201, summary="Soumettre une demande de compte")
async def create_account_request(
    selected_type: Optional[str] = Form(None),
    surname: Optional[str] = Form(None),
    first_name: Optional[str] = Form(None),
    middle_name: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    school: Optional[str] = Form(None),
    school_id: Optional[str] = Form(None),
    personal_gmail: Optional[str] = Form(None),
    proof_of_identity: Optional[UploadFile] = File(None),
    prc_id: Optional[UploadFile] = File(None),
    endorsement_letter: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    """
    Enregistre une demande de création de compte et retourne son numéro REQ-.

    Justificatifs obligatoires : proof_of_identity, prc_id, endorsement_letter
    (JPEG, PNG, PDF ou DOC, 5 Mo maximum chacun).
    """
    data = account_request_service.build_account_submission({
        "selected_type": selected_type,
        "surname": surname,
        "first_name": first_name,
        "middle_name": middle_name,
        "designation": designation,
        "school": school,
        "school_id": school_id,
        "personal_gmail": personal_gmail,
    })

    files = []
    for field, upload in (
        ("proof_of_identity", proof_of_identity),
        ("prc_id", prc_id),
        ("endorsement_letter", endorsement_letter),
    ):
        files.extend(await file_storage.read_uploads([upload] if upload else [], field))
    account_request_service.check_required_documents({f.field: f.filename for f in files})
    file_storage.validate_files(files, file_storage.ACCOUNT_ALLOWED_TYPES)

    saved = file_storage.save_files(files, settings.ACCOUNT_UPLOAD_DIR, prefix_with_field=True)
    documents = {f.field: name for f, name in zip(files, saved)}
    try:
        return account_request_service.create_account_request(db, data, documents)
    except Exception:
        file_storage.remove_files(saved, settings.ACCOUNT_UPLOAD_DIR)
        raise


@router.get("", response_model=List[AccountRequestResponse], summary="Lister les demandes de compte")
def list_account_requests(
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """File de traitement : de la plus ancienne à la plus récente."""
    return account_request_service.get_account_requests(db, status, search)


@router.put("/{request_id}/status", response_model=AccountRequestResponse, summary="Changer le statut d'une demande")
def update_account_request_status(
    request_id: int,
    data: RequestStatusUpdate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return account_request_service.update_account_request_status(db, request_id, data)

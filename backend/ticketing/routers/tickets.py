"""
Router des tickets de support.
Création multipart par les écoles, arbitrage des statuts par l'administrateur.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.database import get_db
from ticketing.dependencies import get_current_user, require_admin, require_staff
from ticketing.exceptions import ValidationError
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.ticket import (
    TicketCreated,
    TicketDeviceView,
    TicketResponse,
    TicketStatusUpdate,
)
from ticketing.services import file_storage, ticket_service

router = APIRouter(prefix="/api/v1/tickets", tags=["Tickets"])


@router.post("", response_model=TicketCreated, status_code=201, summary="Créer un ticket")
async def create_ticket(
    requestor: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    request: Optional[str] = Form(None),
    comments: Optional[str] = Form(None),
    batch: Optional[str] = Form(None),
    selected_devices: Optional[str] = Form(None, alias="selectedDevices"),
    attachments: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(require_staff),
):
    """
    Crée un ticket au nom du compte école connecté.

    Champs : requestor, category (Hardware | Software), request, comments?,
    batch (obligatoire pour Hardware, interdit pour Software),
    selectedDevices (JSON : [{"serialNumber", "issueDescription"}]), attachments (fichiers).

    Les fichiers sont écrits avant la transaction et supprimés si elle échoue.
    """
    submission = ticket_service.build_ticket_submission(
        requestor, category, request, comments, batch, selected_devices
    )

    files = await file_storage.read_uploads(attachments, "attachments")
    if len(files) > settings.MAX_TICKET_ATTACHMENTS:
        raise ValidationError(
            f"{settings.MAX_TICKET_ATTACHMENTS} pièces jointes maximum.", ["attachments"]
        )
    file_storage.validate_files(files, file_storage.TICKET_ALLOWED_TYPES)

    saved = file_storage.save_files(files, settings.UPLOAD_DIR)
    try:
        return ticket_service.create_ticket(db, submission, saved, user)
    except Exception:
        file_storage.remove_files(saved, settings.UPLOAD_DIR)
        raise


@router.get("", response_model=List[TicketResponse], summary="Lister les tickets")
def list_tickets(
    status: Optional[str] = None,
    search: Optional[str] = None,
    archived: bool = False,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
):
    """Administrateur : tous les tickets. Compte école : uniquement les siens."""
    return ticket_service.get_tickets(db, user, status, search, archived)


@router.get("/devices", response_model=List[TicketDeviceView], summary="Appareils de tous les tickets")
def list_all_ticket_devices(
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(require_admin),
):
    return ticket_service.get_ticket_devices(db, user)


@router.get("/{ticket_id}", response_model=TicketResponse, summary="Détail d'un ticket")
def get_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
):
    return ticket_service.get_ticket(db, ticket_id, user)


@router.get("/{ticket_number}/devices", response_model=List[TicketDeviceView], summary="Appareils d'un ticket")
def list_ticket_devices(
    ticket_number: str,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
):
    """Vue ticket → appareil → lot. Un compte école ne voit que ses propres tickets."""
    return ticket_service.get_ticket_devices(db, user, ticket_number)


@router.put("/{ticket_id}/status", response_model=TicketResponse, summary="Changer le statut d'un ticket")
def update_ticket_status(
    ticket_id: int,
    data: TicketStatusUpdate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    """Tout statut peut passer à tout autre. Completed horodate la clôture, en sortir l'efface."""
    return ticket_service.update_ticket_status(db, ticket_id, data.status)


@router.put("/{ticket_id}/archive", response_model=TicketResponse, summary="Archiver un ticket")
def archive_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(require_staff),
):
    return ticket_service.archive_ticket(db, ticket_id, user)

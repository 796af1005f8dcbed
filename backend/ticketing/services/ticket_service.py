"""
Service métier pour les tickets de support.

Un ticket Hardware référence un lot de l'école et un ou plusieurs appareils de ce lot.
Règle de liaison des appareils : une sélection dont le numéro de série est absent du lot
est ignorée (avertissement), mais si aucune sélection n'est retenue la création entière
échoue avec NoValidDevicesError.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from ticketing import clock
from ticketing.exceptions import ForbiddenError, NoValidDevicesError, NotFoundError, ValidationError
from ticketing.models.batch import Batch, BatchDevice
from ticketing.models.enums import Role, TicketCategory, TicketStatus, parse_enum
from ticketing.models.ticket import Ticket, TicketDevice
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.ticket import (
    DeviceSelection,
    TicketCreated,
    TicketDeviceView,
    TicketResponse,
    TicketSubmission,
)
from ticketing.services import numbering
from ticketing.services.list_filter import TICKET_SEARCH_FIELDS, filter_records
from ticketing.services.status_rules import apply_ticket_status

logger = logging.getLogger(__name__)

_selections_adapter = TypeAdapter(List[DeviceSelection])


def build_ticket_submission(
    requestor: Optional[str],
    category: Optional[str],
    request: Optional[str],
    comments: Optional[str] = None,
    batch: Optional[str] = None,
    selected_devices: Optional[str] = None,
) -> TicketSubmission:
    """
    Valide les champs du formulaire multipart et construit la soumission.
    Tous les champs fautifs sont rapportés ensemble dans une seule ValidationError.
    """
    fields = [
        name for name, value in (("requestor", requestor), ("category", category), ("request", request))
        if not (value or "").strip()
    ]
    errors: List[str] = []
    if fields:
        errors.append("Champs obligatoires manquants : " + ", ".join(fields) + ".")

    parsed_category = None
    if "category" not in fields:
        try:
            parsed_category = parse_enum(TicketCategory, category)
        except ValueError as e:
            errors.append(str(e))
            fields.append("category")

    batch_id = None
    if (batch or "").strip():
        try:
            batch_id = int(batch)
        except ValueError:
            errors.append("Identifiant de lot invalide.")
            fields.append("batch")

    devices: List[DeviceSelection] = []
    if (selected_devices or "").strip():
        try:
            devices = _selections_adapter.validate_json(selected_devices)
        except PydanticValidationError:
            errors.append("Format JSON invalide pour selectedDevices.")
            fields.append("selectedDevices")

    if parsed_category == TicketCategory.HARDWARE and batch_id is None and "batch" not in fields:
        errors.append("Un lot est obligatoire pour un problème matériel.")
        fields.append("batch")
    if parsed_category == TicketCategory.SOFTWARE and batch_id is not None:
        errors.append("Un ticket logiciel ne doit pas référencer de lot.")
        fields.append("batch")

    if errors:
        raise ValidationError(" ".join(errors), fields)

    return TicketSubmission(
        requestor=requestor.strip(),
        category=parsed_category.value,
        request=request.strip(),
        comments=(comments or "").strip() or None,
        batch_id=batch_id,
        devices=devices,
    )


def link_ticket_to_devices(
    db: Session,
    ticket_id: int,
    batch_id: int,
    selections: List[DeviceSelection],
) -> Tuple[int, List[str]]:
    """
    Lie le ticket aux appareils du lot désignés par numéro de série.

    Un numéro de série n'a de sens qu'à l'intérieur de son lot : la résolution est
    limitée à batch_id. Les sélections introuvables sont ignorées ; si aucune n'est
    retenue, lève NoValidDevicesError. Ne committe pas.

    Retourne (nombre d'appareils liés, numéros de série ignorés).
    """
    wanted = [s.serial_number.strip() for s in selections if s.serial_number.strip()]
    rows = []
    if wanted:
        rows = db.execute(
            select(BatchDevice.id, BatchDevice.serial_number)
            .where(BatchDevice.batch_id == batch_id, BatchDevice.serial_number.in_(wanted))
        ).all()
    device_ids = {serial: device_id for device_id, serial in rows}

    records = []
    skipped: List[str] = []
    seen = set()
    for selection in selections:
        serial = selection.serial_number.strip()
        if serial in seen:
            continue
        seen.add(serial)
        device_id = device_ids.get(serial)
        if device_id is None:
            logger.warning("Appareil '%s' introuvable dans le lot %s : sélection ignorée", serial, batch_id)
            skipped.append(serial)
            continue
        records.append({
            "ticket_id": ticket_id,
            "batch_device_id": device_id,
            "issue_description": (selection.issue_description or "").strip()
            or f"Problème signalé sur l'appareil {serial}",
        })

    if not records:
        raise NoValidDevicesError("Aucun appareil valide trouvé dans le lot.")

    db.bulk_insert_mappings(TicketDevice, records)
    return len(records), skipped


def create_ticket(
    db: Session,
    data: TicketSubmission,
    attachments: List[str],
    user: TokenClaims,
) -> TicketCreated:
    """
    Crée un ticket (statut Pending) et, pour un ticket Hardware, ses liens vers les appareils.
    Ticket et liens sont committés ensemble ou pas du tout.
    """
    if data.requestor != user.username:
        raise ForbiddenError("Un ticket ne peut être créé qu'au nom du compte connecté.")

    if data.category == TicketCategory.HARDWARE.value:
        batch = db.get(Batch, data.batch_id)
        if batch is None:
            raise NotFoundError("Lot introuvable.")
        if batch.school_code != user.school_code:
            raise ForbiddenError("Ce lot n'appartient pas à votre école.")

    def attempt() -> TicketCreated:
        ticket = Ticket(
            ticket_number=numbering.generate_ticket_number(),
            requestor=data.requestor,
            category=data.category,
            request=data.request,
            comments=data.comments,
            attachments=list(attachments),
            status=TicketStatus.PENDING.value,
            batch_id=data.batch_id,
            archived=False,
        )
        linked, skipped = 0, []
        try:
            db.add(ticket)
            db.flush()
            if data.category == TicketCategory.HARDWARE.value:
                linked, skipped = link_ticket_to_devices(db, ticket.id, data.batch_id, data.devices)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Ticket %s créé par %s (%s, %d appareil(s), %d pièce(s) jointe(s))",
            ticket.ticket_number, data.requestor, data.category, linked, len(attachments),
        )
        return TicketCreated(
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            linked_devices=linked,
            skipped_serials=skipped,
        )

    return numbering.create_with_unique_number(db, attempt, "ticket")


def get_tickets(
    db: Session,
    user: TokenClaims,
    status: Optional[str] = None,
    search: Optional[str] = None,
    archived: bool = False,
) -> List[TicketResponse]:
    """
    Liste les tickets du plus récent au plus ancien.
    Administrateur : tous les tickets ; compte école : uniquement les siens.
    Les tickets archivés sont exclus sauf si archived=True.
    """
    query = (
        select(Ticket)
        .where(Ticket.archived.is_(archived))
        .order_by(Ticket.created_at.desc(), Ticket.id.desc())
    )
    if user.role != Role.ADMIN:
        query = query.where(Ticket.requestor == user.username)
    tickets = db.execute(query).scalars().all()

    responses = [TicketResponse.model_validate(t) for t in tickets]
    return filter_records(responses, status, search, TICKET_SEARCH_FIELDS)


def get_ticket(db: Session, ticket_id: int, user: TokenClaims) -> TicketResponse:
    ticket = db.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket introuvable.")
    if user.role != Role.ADMIN and ticket.requestor != user.username:
        raise ForbiddenError("Ce ticket appartient à un autre compte.")
    return TicketResponse.model_validate(ticket)


def update_ticket_status(
    db: Session,
    ticket_id: int,
    status: TicketStatus,
    now: Optional[datetime] = None,
) -> TicketResponse:
    """Change le statut (arbitrage administrateur) en maintenant closed_at."""
    ticket = db.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket introuvable.")

    previous = ticket.status
    apply_ticket_status(ticket, status, now or clock.now())
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s : %s → %s", ticket.ticket_number, previous, ticket.status)
    return TicketResponse.model_validate(ticket)


def archive_ticket(db: Session, ticket_id: int, user: TokenClaims) -> TicketResponse:
    """Archive un ticket (idempotent). Réservé au compte école qui l'a créé."""
    ticket = db.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket introuvable.")
    if ticket.requestor != user.username:
        raise ForbiddenError("Seul le demandeur peut archiver ce ticket.")

    if not ticket.archived:
        ticket.archived = True
        db.commit()
        db.refresh(ticket)
        logger.info("Ticket %s archivé", ticket.ticket_number)
    return TicketResponse.model_validate(ticket)


def get_ticket_devices(
    db: Session,
    user: TokenClaims,
    ticket_number: Optional[str] = None,
) -> List[TicketDeviceView]:
    """Vue ticket → appareil → lot, pour un ticket ou pour tous (administrateur)."""
    query = (
        select(
            Ticket.ticket_number,
            Ticket.requestor,
            Batch.id,
            Batch.batch_number,
            BatchDevice.device_type,
            BatchDevice.serial_number,
            TicketDevice.issue_description,
        )
        .join(TicketDevice, TicketDevice.ticket_id == Ticket.id)
        .join(BatchDevice, BatchDevice.id == TicketDevice.batch_device_id)
        .join(Batch, Batch.id == BatchDevice.batch_id)
        .order_by(BatchDevice.id)
    )
    if ticket_number is not None:
        query = query.where(Ticket.ticket_number == ticket_number)
    if user.role != Role.ADMIN:
        query = query.where(Ticket.requestor == user.username)

    return [
        TicketDeviceView(
            ticket_number=row[0],
            requestor=row[1],
            batch_id=row[2],
            batch_number=row[3],
            device_type=row[4],
            serial_number=row[5],
            issue_description=row[6],
        )
        for row in db.execute(query).all()
    ]

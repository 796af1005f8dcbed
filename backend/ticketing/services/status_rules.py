"""
Règles de transition de statut par entité.

- Ticket : tout statut peut passer à tout autre (arbitrage administrateur).
  Passer à Completed horodate closed_at ; en sortir l'efface.
- Lot : table explicite (statut actuel × action → statut cible). Seul un lot Pending
  peut être reçu ou annulé ; Delivered et Cancelled sont terminaux.
- Demandes de compte / réinitialisation : transitions libres. Completed horodate
  completed_at ; tout autre statut l'efface. Sortir de Rejected sans note efface
  le motif du rejet.

Ces fonctions ne touchent pas à la session : elles modifient l'objet passé en argument
et laissent le commit à l'appelant.
"""

from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from ticketing.exceptions import InvalidStateError
from ticketing.models.enums import BatchStatus, RequestStatus, TicketStatus


class BatchAction(str, Enum):
    RECEIVE = "receive"
    CANCEL = "cancel"


BATCH_TRANSITIONS: Dict[Tuple[BatchStatus, BatchAction], BatchStatus] = {
    (BatchStatus.PENDING, BatchAction.RECEIVE): BatchStatus.DELIVERED,
    (BatchStatus.PENDING, BatchAction.CANCEL): BatchStatus.CANCELLED,
}

_BATCH_ACTION_TARGET = {
    BatchAction.RECEIVE: BatchStatus.DELIVERED,
    BatchAction.CANCEL: BatchStatus.CANCELLED,
}


def initial_batch_status(send_date: date, today: date) -> Tuple[BatchStatus, Optional[date]]:
    """
    Statut initial d'un lot : Delivered (reçu à la date d'envoi) si l'envoi est
    strictement antérieur à aujourd'hui, sinon Pending.
    """
    if send_date < today:
        return BatchStatus.DELIVERED, send_date
    return BatchStatus.PENDING, None


def next_batch_status(current: str, action: BatchAction) -> BatchStatus:
    """Retourne le statut cible ou lève InvalidStateError si la transition est interdite."""
    target = BATCH_TRANSITIONS.get((BatchStatus(current), action))
    if target is None:
        raise InvalidStateError(
            current,
            _BATCH_ACTION_TARGET[action].value,
            f"Seul un lot en attente (Pending) peut passer à "
            f"{_BATCH_ACTION_TARGET[action].value} ; statut actuel : {current}.",
        )
    return target


def apply_batch_action(batch, action: BatchAction, today: date) -> None:
    """Applique l'action au lot et horodate la date correspondante."""
    target = next_batch_status(batch.status, action)
    batch.status = target.value
    if target == BatchStatus.DELIVERED:
        batch.received_date = today
    elif target == BatchStatus.CANCELLED:
        batch.cancelled_date = today


def apply_ticket_status(ticket, target: TicketStatus, now: datetime) -> None:
    """Change le statut d'un ticket en maintenant closed_at ⇔ Completed."""
    if target == TicketStatus.COMPLETED:
        if ticket.status != TicketStatus.COMPLETED.value or ticket.closed_at is None:
            ticket.closed_at = now
    else:
        ticket.closed_at = None
    ticket.status = target.value


def apply_request_status(request, target: RequestStatus, now: datetime, notes: Optional[str] = None) -> None:
    """
    Change le statut d'une demande de compte ou de réinitialisation.
    Le motif d'un rejet n'est pas conservé quand la demande quitte Rejected sans nouvelle note.
    """
    if target == RequestStatus.COMPLETED:
        if request.status != RequestStatus.COMPLETED.value or request.completed_at is None:
            request.completed_at = now
    else:
        request.completed_at = None
    if notes is not None:
        request.notes = notes.strip() or None
    elif request.status == RequestStatus.REJECTED.value and target != RequestStatus.REJECTED:
        request.notes = None
    request.status = target.value

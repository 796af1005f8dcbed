"""
Génération des numéros lisibles : tickets, lots, demandes de compte et de réinitialisation.

- Ticket : 6 derniers chiffres de l'horodatage (ms) + 5 chiffres aléatoires
- Lot : AAAAMMJJ-NNNN, séquence sur 4 chiffres propre à la journée
- Demande de compte : REQ- + 2 lettres + 6 chiffres d'horodatage + 5 chiffres aléatoires
- Réinitialisation : RST- + 3 lettres + 4 chiffres d'horodatage + 6 chiffres aléatoires

L'unicité des numéros aléatoires est probabiliste ; celle des numéros de lot repose
sur la séquence du jour. Dans les deux cas un index unique protège la base et
create_with_unique_number() rejoue la création en cas de collision.
"""

import logging
import random
import string
import time
from datetime import date
from typing import Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.exceptions import ConflictError
from ticketing.models.batch import Batch

logger = logging.getLogger(__name__)

T = TypeVar("T")

BATCH_SEQUENCE_MAX = 9999
REQUEST_PREFIX = "REQ-"
RESET_PREFIX = "RST-"

_rng = random.SystemRandom()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _timestamp_digits(now_ms: Optional[int], size: int) -> str:
    return str(now_ms if now_ms is not None else _now_ms())[-size:]


def _letters(rng, count: int) -> str:
    return "".join(rng.choice(string.ascii_uppercase) for _ in range(count))


def generate_ticket_number(now_ms: Optional[int] = None, rng=_rng) -> str:
    return f"{_timestamp_digits(now_ms, 6)}{rng.randint(10000, 99999)}"


def generate_request_number(now_ms: Optional[int] = None, rng=_rng) -> str:
    return f"{REQUEST_PREFIX}{_letters(rng, 2)}{_timestamp_digits(now_ms, 6)}{rng.randint(10000, 99999)}"


def generate_reset_number(now_ms: Optional[int] = None, rng=_rng) -> str:
    return f"{RESET_PREFIX}{_letters(rng, 3)}{_timestamp_digits(now_ms, 4)}{rng.randint(100000, 999999)}"


def batch_number_prefix(day: date) -> str:
    return day.strftime("%Y%m%d")


def format_batch_number(day: date, sequence: int) -> str:
    return f"{batch_number_prefix(day)}-{sequence:04d}"


def next_batch_number(db: Session, day: date) -> str:
    """
    Calcule le prochain numéro de lot du jour à partir du plus grand numéro existant.
    Premier lot de la journée : 0001. Lève ConflictError au-delà de 9999 lots par jour.
    """
    prefix = batch_number_prefix(day)
    last = db.execute(
        select(Batch.batch_number)
        .where(Batch.batch_number.like(f"{prefix}-%"))
        .order_by(Batch.batch_number.desc())
        .limit(1)
    ).scalar()

    sequence = int(last.split("-")[1]) + 1 if last else 1
    if sequence > BATCH_SEQUENCE_MAX:
        raise ConflictError(f"Nombre maximal de lots atteint pour le {day.isoformat()}.")
    return format_batch_number(day, sequence)


def create_with_unique_number(db: Session, create: Callable[[], T], label: str) -> T:
    """
    Exécute `create` (qui génère un numéro, insère et committe) et la rejoue si la base
    signale une violation d'unicité : deux créations simultanées ont obtenu le même numéro.
    Après NUMBER_MAX_RETRIES tentatives, lève ConflictError.
    """
    attempts = settings.NUMBER_MAX_RETRIES
    for attempt in range(1, attempts + 1):
        try:
            return create()
        except IntegrityError:
            db.rollback()
            logger.warning("Collision de numéro (%s), tentative %d/%d", label, attempt, attempts)
    raise ConflictError(f"Impossible d'attribuer un numéro unique ({label}). Réessayez.")

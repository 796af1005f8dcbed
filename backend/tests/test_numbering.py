"""
Tests unitaires de la génération des numéros (tickets, lots, demandes).
"""

import random
import re
from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from ticketing.exceptions import ConflictError
from ticketing.models.batch import Batch
from ticketing.services.numbering import (
    create_with_unique_number,
    format_batch_number,
    generate_request_number,
    generate_reset_number,
    generate_ticket_number,
    next_batch_number,
)

NOW_MS = 1704067200123


# --- Helpers ---

def make_batch(number: str) -> Batch:
    return Batch(
        batch_number=number,
        school_code="101234",
        school_name="Rizal Elementary School",
        send_date=date(2024, 1, 1),
        status="Pending",
    )


def integrity_error() -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception("duplicate key value"))


# ============================================================
# Numéros aléatoires
# ============================================================

def test_numero_ticket_format():
    number = generate_ticket_number(now_ms=NOW_MS, rng=random.Random(1))
    assert re.fullmatch(r"200123\d{5}", number)


def test_numero_demande_format():
    number = generate_request_number(now_ms=NOW_MS, rng=random.Random(1))
    assert re.fullmatch(r"REQ-[A-Z]{2}200123\d{5}", number)


def test_numero_reinitialisation_format():
    number = generate_reset_number(now_ms=NOW_MS, rng=random.Random(1))
    assert re.fullmatch(r"RST-[A-Z]{3}0123\d{6}", number)


def test_numeros_sans_horloge_injectee():
    assert re.fullmatch(r"\d{11}", generate_ticket_number())


# ============================================================
# Numéros de lot
# ============================================================

def test_format_numero_lot():
    assert format_batch_number(date(2024, 1, 1), 1) == "20240101-0001"
    assert format_batch_number(date(2024, 12, 31), 42) == "20241231-0042"


def test_premier_lot_du_jour(db_session):
    assert next_batch_number(db_session, date(2024, 1, 1)) == "20240101-0001"


def test_lot_suivant_apres_le_plus_grand(db_session):
    db_session.add_all([
        make_batch("20240101-0001"),
        make_batch("20240101-0007"),
        make_batch("20231231-0009"),
    ])
    db_session.commit()
    assert next_batch_number(db_session, date(2024, 1, 1)) == "20240101-0008"


def test_sequence_propre_a_chaque_jour(db_session):
    db_session.add(make_batch("20240101-0003"))
    db_session.commit()
    assert next_batch_number(db_session, date(2024, 1, 2)) == "20240102-0001"


def test_depassement_sequence_journaliere(db_session):
    db_session.add(make_batch("20240101-9999"))
    db_session.commit()
    with pytest.raises(ConflictError):
        next_batch_number(db_session, date(2024, 1, 1))


# ============================================================
# Nouvelle tentative sur collision
# ============================================================

def test_collision_rejouee():
    db = MagicMock()
    create = MagicMock(side_effect=[integrity_error(), "ok"])
    assert create_with_unique_number(db, create, "ticket") == "ok"
    assert create.call_count == 2
    db.rollback.assert_called_once()


def test_collisions_repetees_conflit():
    db = MagicMock()
    create = MagicMock(side_effect=integrity_error())
    with pytest.raises(ConflictError):
        create_with_unique_number(db, create, "lot")
    assert create.call_count == 3


def test_autre_erreur_non_rejouee():
    db = MagicMock()
    create = MagicMock(side_effect=ValueError("boom"))
    with pytest.raises(ValueError):
        create_with_unique_number(db, create, "lot")
    assert create.call_count == 1

"""
Tests unitaires du filtre commun des listes (statut + recherche).
"""

from types import SimpleNamespace

from ticketing.models.enums import TicketStatus
from ticketing.services.list_filter import (
    BATCH_SEARCH_FIELDS,
    TICKET_SEARCH_FIELDS,
    filter_records,
    matches_search,
    matches_status,
)


# --- Helpers ---

def make_ticket(number, requestor="rizal_es", category="Hardware", status="Pending", comments=None):
    return SimpleNamespace(
        ticket_number=number, requestor=requestor, category=category, status=status, comments=comments
    )


TICKETS = [
    make_ticket("12345600001", status="Pending"),
    make_ticket("12345600002", requestor="bonifacio_hs", category="Software", status="Completed"),
    make_ticket("12345600003", status="In Progress", comments="écran cassé"),
]


# ============================================================
# Statut
# ============================================================

def test_statut_all_garde_tout():
    assert filter_records(TICKETS, "all", None, TICKET_SEARCH_FIELDS) == TICKETS
    assert filter_records(TICKETS, "ALL", "", TICKET_SEARCH_FIELDS) == TICKETS


def test_statut_insensible_a_la_casse():
    result = filter_records(TICKETS, "in progress", None, TICKET_SEARCH_FIELDS)
    assert [t.ticket_number for t in result] == ["12345600003"]


def test_statut_enum_compare_sur_sa_valeur():
    record = SimpleNamespace(status=TicketStatus.ON_HOLD)
    assert matches_status(record, "On Hold")


def test_statut_absent_ne_correspond_pas():
    assert not matches_status(SimpleNamespace(status=None), "Pending")


# ============================================================
# Recherche
# ============================================================

def test_recherche_vide_garde_tout():
    assert filter_records(TICKETS, None, "   ", TICKET_SEARCH_FIELDS) == TICKETS


def test_recherche_sous_chaine_insensible_a_la_casse():
    result = filter_records(TICKETS, None, "BONIFACIO", TICKET_SEARCH_FIELDS)
    assert [t.ticket_number for t in result] == ["12345600002"]


def test_recherche_ignore_les_champs_non_recherchables():
    """Les commentaires ne font pas partie des champs recherchables d'un ticket."""
    assert filter_records(TICKETS, None, "écran", TICKET_SEARCH_FIELDS) == []


def test_statut_et_recherche_combines_en_et():
    result = filter_records(TICKETS, "Pending", "software", TICKET_SEARCH_FIELDS)
    assert result == []


def test_ordre_conserve():
    result = filter_records(TICKETS, None, "1234560000", TICKET_SEARCH_FIELDS)
    assert result == TICKETS


def test_recherche_lot_par_code_ecole():
    batch = SimpleNamespace(batch_number="20240101-0001", school_name="Rizal ES", school_code="101234")
    assert matches_search(batch, "1012", BATCH_SEARCH_FIELDS)
    assert not matches_search(batch, "9999", BATCH_SEARCH_FIELDS)


def test_filtre_categorie_comme_statut():
    issues = [SimpleNamespace(name="Écran noir", category="Hardware"),
              SimpleNamespace(name="Mot de passe", category="Software")]
    result = filter_records(issues, "software", None, ("name",), status_field="category")
    assert [i.name for i in result] == ["Mot de passe"]

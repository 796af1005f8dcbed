"""
Filtre commun des listes (tickets, lots, problèmes, demandes de compte).

Deux critères combinés en ET :
- statut : "all" ou valeur exacte, insensible à la casse
- recherche : sous-chaîne insensible à la casse dans au moins un des champs
  recherchables propres au type d'enregistrement ; vide = tout correspond

Fonction pure : mêmes entrées, même résultat, aucun état caché.
"""

from typing import Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

ALL = "all"

TICKET_SEARCH_FIELDS = ("ticket_number", "requestor", "category")
BATCH_SEARCH_FIELDS = ("batch_number", "school_name", "school_code")
ISSUE_SEARCH_FIELDS = ("name",)
ACCOUNT_REQUEST_SEARCH_FIELDS = ("request_number", "id", "selected_type", "first_name", "surname", "middle_name")
RESET_REQUEST_SEARCH_FIELDS = ("reset_number", "id", "selected_type", "first_name", "surname", "middle_name")


def _as_text(value) -> str:
    # Les Enum str exposent leur valeur, pas "Classe.MEMBRE"
    return str(getattr(value, "value", value))


def matches_status(record, status: Optional[str], status_field: str = "status") -> bool:
    if not status or status.strip().lower() == ALL:
        return True
    value = getattr(record, status_field, None)
    if value is None:
        return False
    return _as_text(value).lower() == status.strip().lower()


def matches_search(record, search: Optional[str], fields: Sequence[str]) -> bool:
    term = (search or "").strip().lower()
    if not term:
        return True
    for field in fields:
        value = getattr(record, field, None)
        if value is not None and term in _as_text(value).lower():
            return True
    return False


def filter_records(
    records: Iterable[T],
    status: Optional[str],
    search: Optional[str],
    search_fields: Sequence[str],
    status_field: str = "status",
) -> List[T]:
    """Retourne, dans l'ordre d'origine, les enregistrements qui satisfont les deux critères."""
    return [
        r for r in records
        if matches_status(r, status, status_field) and matches_search(r, search, search_fields)
    ]

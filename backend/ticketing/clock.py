"""
Horloge du portail : "aujourd'hui" et "maintenant" dans le fuseau configuré.

Toutes les comparaisons de dates (statut initial d'un lot, date de réception,
préfixe du numéro de lot) passent par today(), jamais par une troncature d'horodatage.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ticketing.config import settings


def now() -> datetime:
    """Horodatage local naïf (sans tzinfo), tel que stocké en base."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def today() -> date:
    return now().date()

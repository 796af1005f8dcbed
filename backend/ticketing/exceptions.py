"""
Erreurs métier du portail.

Chaque erreur porte son code HTTP et un identifiant stable (`kind`) renvoyé au client.
Les handlers de ticketing.main les convertissent en réponse JSON :
    {"error": kind, "detail": message, ...extras}
"""

from typing import Iterable, List, Optional


class PortalError(Exception):
    """Erreur de base : 400 générique."""

    status_code = 400
    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def extras(self) -> dict:
        """Champs supplémentaires ajoutés au corps de la réponse."""
        return {}

    def headers(self) -> Optional[dict]:
        return None


class UnauthorizedError(PortalError):
    status_code = 401
    kind = "Unauthorized"

    def headers(self) -> Optional[dict]:
        return {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(UnauthorizedError):
    """Identifiants refusés. Indique le nombre d'essais restants quand il est connu."""

    kind = "InvalidCredentials"

    def __init__(self, message: str, remaining_attempts: Optional[int] = None):
        super().__init__(message)
        self.remaining_attempts = remaining_attempts

    def extras(self) -> dict:
        if self.remaining_attempts is None:
            return {}
        return {"remaining_attempts": self.remaining_attempts}


class ForbiddenError(PortalError):
    status_code = 403
    kind = "Forbidden"


class NotFoundError(PortalError):
    status_code = 404
    kind = "NotFound"


class InvalidStateError(PortalError):
    """Transition de statut refusée ; nomme le couple statut actuel / statut visé."""

    status_code = 409
    kind = "InvalidState"

    def __init__(self, current: str, target: str, message: Optional[str] = None):
        super().__init__(message or f"Transition interdite : {current} → {target}.")
        self.current = current
        self.target = target

    def extras(self) -> dict:
        return {"current": self.current, "target": self.target}


class ConflictError(PortalError):
    status_code = 409
    kind = "Conflict"


class DuplicateSerialError(PortalError):
    """Numéros de série déjà utilisés. La liste est complète, pas seulement le premier."""

    status_code = 409
    kind = "DuplicateSerial"

    def __init__(self, duplicates: Iterable[str]):
        self.duplicates: List[str] = list(duplicates)
        super().__init__(
            "Numéros de série déjà enregistrés : " + ", ".join(self.duplicates)
        )

    def extras(self) -> dict:
        return {"duplicates": self.duplicates}


class NoValidDevicesError(PortalError):
    status_code = 400
    kind = "NoValidDevices"


class ValidationError(PortalError):
    """Champs manquants ou invalides. `fields` énumère tous les champs fautifs."""

    status_code = 400
    kind = "ValidationError"

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields: List[str] = list(fields or [])

    def extras(self) -> dict:
        return {"fields": self.fields}


class RateLimitedError(PortalError):
    status_code = 429
    kind = "RateLimited"

    def __init__(self, retry_after: int):
        super().__init__("Trop de tentatives de connexion. Réessayez plus tard.")
        self.retry_after = retry_after

    def extras(self) -> dict:
        return {"retry_after": self.retry_after}

    def headers(self) -> Optional[dict]:
        return {"Retry-After": str(self.retry_after)}

"""
Dépendances FastAPI d'authentification et d'autorisation.

Le jeton est vérifié sans accès à la base : les claims suffisent pour
contrôler le rôle et l'école de l'appelant.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ticketing.exceptions import ForbiddenError, UnauthorizedError
from ticketing.models.enums import Role
from ticketing.schemas.auth import TokenClaims
from ticketing.security import decode_access_token
from ticketing.services.login_limiter import LoginAttemptLimiter, login_limiter

# auto_error=False : l'absence de jeton passe par UnauthorizedError (format d'erreur commun)
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """Retourne les claims du jeton Bearer, ou lève UnauthorizedError."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentification requise.")
    return decode_access_token(credentials.credentials)


def require_admin(user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    if user.role != Role.ADMIN:
        raise ForbiddenError("Action réservée aux administrateurs.")
    return user


def require_staff(user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    if user.role != Role.STAFF:
        raise ForbiddenError("Action réservée aux comptes école.")
    return user


def get_login_limiter() -> LoginAttemptLimiter:
    """Limiteur injecté dans la route de connexion (remplaçable en test)."""
    return login_limiter

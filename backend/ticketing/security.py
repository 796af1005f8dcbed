"""
Utilitaires de sécurité : hachage des mots de passe (bcrypt) et jetons JWT (PyJWT).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError as PydanticValidationError

from ticketing.config import settings
from ticketing.exceptions import UnauthorizedError
from ticketing.schemas.auth import TokenClaims

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Hache un mot de passe avec un sel aléatoire (bcrypt)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Compare un mot de passe candidat à son hash. Un hash illisible ne correspond à rien."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def is_bcrypt_hash(value: str) -> bool:
    """Les anciens comptes peuvent encore stocker un mot de passe en clair."""
    return value.startswith(BCRYPT_PREFIXES)


def create_access_token(claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
    """Signe un jeton portant les claims du compte et une date d'expiration."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = claims.model_dump()
    payload.update({
        "sub": str(claims.id),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    })
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Vérifie la signature et l'expiration du jeton puis extrait les claims.
    Lève UnauthorizedError en cas d'échec, quelle qu'en soit la cause.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Session expirée. Veuillez vous reconnecter.")
    except InvalidTokenError:
        raise UnauthorizedError("Jeton invalide.")

    try:
        return TokenClaims.model_validate(payload)
    except PydanticValidationError:
        raise UnauthorizedError("Jeton incomplet.")

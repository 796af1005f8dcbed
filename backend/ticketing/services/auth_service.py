"""
Service d'authentification : connexion, profil et changement de mot de passe.

Connexion :
1. Refuser d'emblée si le nom d'utilisateur est bloqué par le limiteur
2. Vérifier le mot de passe (les anciens mots de passe en clair sont migrés vers bcrypt)
3. Échec : compter l'échec et indiquer les essais restants
4. Succès : remettre le compteur à zéro et signer un jeton
"""

import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ticketing.exceptions import InvalidCredentialsError, NotFoundError, ValidationError
from ticketing.models.user import User
from ticketing.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse, TokenClaims
from ticketing.security import create_access_token, hash_password, is_bcrypt_hash, verify_password
from ticketing.services.login_limiter import LoginAttemptLimiter

logger = logging.getLogger(__name__)


def _find_user(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def _check_password(db: Session, user: User, password: str) -> bool:
    """
    Vérifie le mot de passe. Un compte encore stocké en clair est comparé en temps
    constant puis migré vers un hash bcrypt s'il correspond.
    """
    if is_bcrypt_hash(user.password_hash):
        return verify_password(password, user.password_hash)

    if not secrets.compare_digest(password.encode("utf-8"), user.password_hash.encode("utf-8")):
        return False
    user.password_hash = hash_password(password)
    db.commit()
    logger.info("Mot de passe de %s migré vers bcrypt", user.username)
    return True


def login(db: Session, data: LoginRequest, limiter: LoginAttemptLimiter) -> LoginResponse:
    """Authentifie un compte. Un nom inconnu et un mauvais mot de passe sont traités pareil."""
    username = data.username.strip()
    limiter.check(username)

    user = _find_user(db, username)
    if user is None or not _check_password(db, user, data.password):
        remaining = limiter.record_failure(username)
        logger.warning("Échec de connexion pour '%s' (%d essai(s) restant(s))", username, remaining)
        raise InvalidCredentialsError("Nom d'utilisateur ou mot de passe incorrect.", remaining)

    limiter.reset(username)
    claims = TokenClaims.model_validate(user)
    logger.info("Connexion de %s (%s)", user.username, user.role)
    return LoginResponse(token=create_access_token(claims), user=claims)


def change_password(db: Session, user: TokenClaims, data: ChangePasswordRequest) -> None:
    """Change le mot de passe du compte connecté après vérification de l'actuel."""
    if data.new_password != data.confirm_password:
        raise ValidationError(
            "La confirmation ne correspond pas au nouveau mot de passe.", ["confirm_password"]
        )

    account = db.get(User, user.id)
    if account is None:
        raise NotFoundError("Compte introuvable.")
    if not _check_password(db, account, data.current_password):
        raise InvalidCredentialsError("Mot de passe actuel incorrect.")

    account.password_hash = hash_password(data.new_password)
    db.commit()
    logger.info("Mot de passe modifié pour %s", account.username)

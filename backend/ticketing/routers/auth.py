"""
Router d'authentification : connexion, profil courant, changement de mot de passe.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import get_current_user, get_login_limiter
from ticketing.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    TokenClaims,
)
from ticketing.services import auth_service
from ticketing.services.login_limiter import LoginAttemptLimiter

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/login", response_model=LoginResponse, summary="Se connecter")
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    limiter: LoginAttemptLimiter = Depends(get_login_limiter),
):
    """
    Vérifie les identifiants et retourne un jeton Bearer.

    - 401 InvalidCredentials : identifiants refusés, avec le nombre d'essais restants
    - 429 RateLimited : trop d'échecs récents pour ce nom d'utilisateur (en-tête Retry-After)
    """
    return auth_service.login(db, data, limiter)


@router.get("/me", response_model=TokenClaims, summary="Compte connecté")
def me(user: TokenClaims = Depends(get_current_user)):
    return user


@router.post("/change-password", response_model=MessageResponse, summary="Changer son mot de passe")
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
):
    auth_service.change_password(db, user, data)
    return MessageResponse(message="Mot de passe modifié.")

"""
Tests du service d'authentification (SQLite en mémoire, limiteur réel).
"""

import pytest

from ticketing.exceptions import InvalidCredentialsError, RateLimitedError, ValidationError
from ticketing.models.user import User
from ticketing.schemas.auth import ChangePasswordRequest, LoginRequest, TokenClaims
from ticketing.security import decode_access_token, hash_password, is_bcrypt_hash, verify_password
from ticketing.services.auth_service import change_password, login
from ticketing.services.login_limiter import LoginAttemptLimiter


# --- Helpers ---

def make_user(db, username="rizal_es", password="s3cret", hashed=True, role="Staff") -> User:
    user = User(
        username=username,
        password_hash=hash_password(password) if hashed else password,
        role=role,
        school="Rizal Elementary School",
        school_code="101234",
        district="District I",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def limiter():
    return LoginAttemptLimiter(max_attempts=3, window_seconds=60)


# ============================================================
# Connexion
# ============================================================

def test_connexion_reussie(db_session, limiter):
    make_user(db_session)
    response = login(db_session, LoginRequest(username="rizal_es", password="s3cret"), limiter)

    claims = decode_access_token(response.token)
    assert claims.username == "rizal_es"
    assert claims.school_code == "101234"
    assert response.user.role == "Staff"


def test_mauvais_mot_de_passe_essais_restants(db_session, limiter):
    make_user(db_session)
    with pytest.raises(InvalidCredentialsError) as exc:
        login(db_session, LoginRequest(username="rizal_es", password="wrong"), limiter)
    assert exc.value.remaining_attempts == 2


def test_utilisateur_inconnu_traite_comme_un_echec(db_session, limiter):
    with pytest.raises(InvalidCredentialsError) as exc:
        login(db_session, LoginRequest(username="fantome", password="x"), limiter)
    assert exc.value.remaining_attempts == 2


def test_blocage_meme_avec_le_bon_mot_de_passe(db_session, limiter):
    make_user(db_session)
    for _ in range(2):
        with pytest.raises(InvalidCredentialsError):
            login(db_session, LoginRequest(username="rizal_es", password="wrong"), limiter)
    with pytest.raises(RateLimitedError):
        login(db_session, LoginRequest(username="rizal_es", password="wrong"), limiter)
    with pytest.raises(RateLimitedError):
        login(db_session, LoginRequest(username="rizal_es", password="s3cret"), limiter)


def test_succes_remet_le_compteur_a_zero(db_session, limiter):
    make_user(db_session)
    with pytest.raises(InvalidCredentialsError):
        login(db_session, LoginRequest(username="rizal_es", password="wrong"), limiter)
    login(db_session, LoginRequest(username="rizal_es", password="s3cret"), limiter)

    with pytest.raises(InvalidCredentialsError) as exc:
        login(db_session, LoginRequest(username="rizal_es", password="wrong"), limiter)
    assert exc.value.remaining_attempts == 2


def test_mot_de_passe_en_clair_migre(db_session, limiter):
    user = make_user(db_session, password="legacy", hashed=False)
    login(db_session, LoginRequest(username="rizal_es", password="legacy"), limiter)

    db_session.refresh(user)
    assert is_bcrypt_hash(user.password_hash)
    assert verify_password("legacy", user.password_hash)


# ============================================================
# Changement de mot de passe
# ============================================================

def test_changement_mot_de_passe(db_session):
    user = make_user(db_session)
    claims = TokenClaims.model_validate(user)

    change_password(db_session, claims, ChangePasswordRequest(
        current_password="s3cret", new_password="n0uveau", confirm_password="n0uveau",
    ))

    db_session.refresh(user)
    assert verify_password("n0uveau", user.password_hash)


def test_confirmation_differente(db_session):
    claims = TokenClaims.model_validate(make_user(db_session))
    with pytest.raises(ValidationError) as exc:
        change_password(db_session, claims, ChangePasswordRequest(
            current_password="s3cret", new_password="a", confirm_password="b",
        ))
    assert exc.value.fields == ["confirm_password"]


def test_mot_de_passe_actuel_incorrect(db_session):
    claims = TokenClaims.model_validate(make_user(db_session))
    with pytest.raises(InvalidCredentialsError):
        change_password(db_session, claims, ChangePasswordRequest(
            current_password="wrong", new_password="a", confirm_password="a",
        ))

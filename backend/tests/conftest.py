"""
Configuration partagée pour tous les tests.

- Tests API : la dépendance get_db est remplacée par un MagicMock (aucune connexion
  réelle à PostgreSQL) et la couche service est patchée au besoin.
- Tests de service transactionnels : base SQLite en mémoire, recréée à chaque test.
"""

import os

# Le moteur est créé à l'import de ticketing.database : pas de PostgreSQL en test
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

import ticketing.models  # noqa: F401
from ticketing.config import settings
from ticketing.database import Base, get_db
from ticketing.dependencies import get_login_limiter
from ticketing.main import app
from ticketing.models.enums import Role
from ticketing.schemas.auth import TokenClaims
from ticketing.security import create_access_token
from ticketing.services.login_limiter import LoginAttemptLimiter


# --- Comptes ---

def make_claims(**kwargs) -> TokenClaims:
    return TokenClaims(
        id=kwargs.get("id", 2),
        username=kwargs.get("username", "rizal_es"),
        role=kwargs.get("role", Role.STAFF),
        school=kwargs.get("school", "Rizal Elementary School"),
        school_code=kwargs.get("school_code", "101234"),
        district=kwargs.get("district", "District I"),
        first_name=kwargs.get("first_name", None),
        last_name=kwargs.get("last_name", None),
    )


@pytest.fixture
def staff_claims() -> TokenClaims:
    return make_claims()


@pytest.fixture
def admin_claims() -> TokenClaims:
    return make_claims(id=1, username="admin", role=Role.ADMIN, school=None, school_code=None, district=None)


@pytest.fixture
def staff_headers(staff_claims):
    return {"Authorization": f"Bearer {create_access_token(staff_claims)}"}


@pytest.fixture
def admin_headers(admin_claims):
    return {"Authorization": f"Bearer {create_access_token(admin_claims)}"}


# --- Client HTTP ---

@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def limiter():
    """Limiteur neuf pour chaque test (le limiteur global garde son état entre requêtes)."""
    return LoginAttemptLimiter(max_attempts=3, window_seconds=60)


@pytest.fixture
def client(mock_db, limiter):
    """Client HTTP de test avec la BDD mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_login_limiter] = lambda: limiter
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --- Stockage ---

@pytest.fixture
def upload_dirs(tmp_path, monkeypatch):
    """Redirige les répertoires de stockage vers un dossier temporaire."""
    tickets_dir = tmp_path / "uploads"
    accounts_dir = tmp_path / "deped_uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tickets_dir))
    monkeypatch.setattr(settings, "ACCOUNT_UPLOAD_DIR", str(accounts_dir))
    return tickets_dir, accounts_dir


# --- Base SQLite ---

@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, schéma complet créé pour le test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

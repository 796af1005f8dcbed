"""
Tests unitaires du hachage des mots de passe et des jetons JWT.
"""

from datetime import timedelta

import jwt
import pytest

from ticketing.config import settings
from ticketing.exceptions import UnauthorizedError
from ticketing.models.enums import Role
from ticketing.schemas.auth import TokenClaims
from ticketing.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    is_bcrypt_hash,
    verify_password,
)


def make_claims() -> TokenClaims:
    return TokenClaims(id=7, username="rizal_es", role=Role.STAFF, school_code="101234")


def test_hash_et_verification():
    hashed = hash_password("s3cret")
    assert is_bcrypt_hash(hashed)
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_hash_sale_differemment():
    assert hash_password("s3cret") != hash_password("s3cret")


def test_hash_illisible_ne_correspond_pas():
    assert not verify_password("s3cret", "s3cret")
    assert not is_bcrypt_hash("s3cret")


def test_jeton_porte_les_claims():
    claims = decode_access_token(create_access_token(make_claims()))
    assert claims.id == 7
    assert claims.username == "rizal_es"
    assert claims.role == Role.STAFF
    assert claims.school_code == "101234"


def test_jeton_expire_refuse():
    token = create_access_token(make_claims(), expires_delta=timedelta(seconds=-5))
    with pytest.raises(UnauthorizedError) as exc:
        decode_access_token(token)
    assert "expirée" in exc.value.message


def test_jeton_signe_avec_une_autre_cle_refuse():
    token = jwt.encode({"id": 1, "username": "x", "role": "Admin"}, "autre-cle", algorithm=settings.ALGORITHM)
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_jeton_incomplet_refuse():
    token = jwt.encode({"sub": "1"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_jeton_illisible_refuse():
    with pytest.raises(UnauthorizedError):
        decode_access_token("pas-un-jeton")

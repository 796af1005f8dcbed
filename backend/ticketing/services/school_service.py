"""
Service de gestion des comptes école (rôle Staff).
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.exceptions import ConflictError, NotFoundError
from ticketing.models.enums import Role
from ticketing.models.user import User
from ticketing.schemas.school import SchoolCreate, SchoolDirectoryEntry, SchoolResponse
from ticketing.security import hash_password

logger = logging.getLogger(__name__)


def create_school(db: Session, data: SchoolCreate) -> SchoolResponse:
    """Crée le compte d'une école. Lève ConflictError si le nom d'utilisateur est pris."""
    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        role=Role.STAFF.value,
        school=data.school,
        school_code=data.school_code,
        district=data.district,
        address=data.address,
        principal=data.principal,
        contact_number=data.contact_number,
        email=data.email,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Le nom d'utilisateur '{data.username}' est déjà utilisé.")
    db.refresh(user)
    logger.info("Compte école créé : %s (%s)", user.username, user.school_code)
    return SchoolResponse.model_validate(user)


def get_schools(db: Session, district: Optional[str] = None) -> List[SchoolResponse]:
    query = select(User).where(User.role == Role.STAFF.value).order_by(User.school, User.username)
    if district:
        query = query.where(User.district == district)
    return [SchoolResponse.model_validate(u) for u in db.execute(query).scalars().all()]


def get_school_directory(db: Session) -> List[SchoolDirectoryEntry]:
    """Couples (code, nom) distincts, pour les listes déroulantes des formulaires publics."""
    rows = db.execute(
        select(User.school_code, User.school)
        .where(User.role == Role.STAFF.value, User.school.is_not(None))
        .distinct()
        .order_by(User.school)
    ).all()
    return [SchoolDirectoryEntry(school_code=code, school=school) for code, school in rows]


def reset_school_password(db: Session, school: str) -> int:
    """
    Remet le mot de passe par défaut sur tous les comptes de l'école.
    Retourne le nombre de comptes modifiés ; NotFoundError si aucun.
    """
    accounts = db.execute(
        select(User).where(User.role == Role.STAFF.value, User.school == school)
    ).scalars().all()
    if not accounts:
        raise NotFoundError(f"Aucun compte pour l'école '{school}'.")

    password_hash = hash_password(settings.DEFAULT_SCHOOL_PASSWORD)
    for account in accounts:
        account.password_hash = password_hash
    db.commit()
    logger.info("Mot de passe réinitialisé pour %d compte(s) de %s", len(accounts), school)
    return len(accounts)

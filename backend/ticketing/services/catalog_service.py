"""
Service des catalogues administrés : problèmes types et types d'appareils.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.exceptions import ConflictError, NotFoundError
from ticketing.models.batch import DeviceType
from ticketing.models.issue import Issue
from ticketing.schemas.batch import DeviceTypeCreate, DeviceTypeResponse
from ticketing.schemas.issue import IssueCreate, IssueResponse
from ticketing.services.list_filter import ISSUE_SEARCH_FIELDS, filter_records

logger = logging.getLogger(__name__)


# --- Problèmes types ---

def get_issues(db: Session, category: Optional[str] = None, search: Optional[str] = None) -> List[IssueResponse]:
    """Liste le catalogue ; la catégorie joue le rôle du filtre de statut, la recherche porte sur le nom."""
    issues = db.execute(select(Issue).order_by(Issue.category, Issue.name)).scalars().all()
    responses = [IssueResponse.model_validate(i) for i in issues]
    return filter_records(responses, category, search, ISSUE_SEARCH_FIELDS, status_field="category")


def create_issue(db: Session, data: IssueCreate) -> IssueResponse:
    """Ajoute un problème au catalogue. Lève ConflictError si le nom existe déjà."""
    issue = Issue(name=data.name, category=data.category.value)
    db.add(issue)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Le problème '{data.name}' existe déjà.")
    db.refresh(issue)
    logger.info("Problème ajouté au catalogue : %s (%s)", issue.name, issue.category)
    return IssueResponse.model_validate(issue)


def delete_issue(db: Session, issue_id: int) -> None:
    issue = db.get(Issue, issue_id)
    if issue is None:
        raise NotFoundError("Problème introuvable.")
    db.delete(issue)
    db.commit()


# --- Types d'appareils ---

def get_device_types(db: Session) -> List[DeviceTypeResponse]:
    types = db.execute(select(DeviceType).order_by(DeviceType.name)).scalars().all()
    return [DeviceTypeResponse.model_validate(t) for t in types]


def create_device_type(db: Session, data: DeviceTypeCreate) -> DeviceTypeResponse:
    device_type = DeviceType(name=data.name)
    db.add(device_type)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Le type d'appareil '{data.name}' existe déjà.")
    db.refresh(device_type)
    return DeviceTypeResponse.model_validate(device_type)


def delete_device_type(db: Session, name: str) -> None:
    device_type = db.execute(
        select(DeviceType).where(DeviceType.name == name)
    ).scalar_one_or_none()
    if device_type is None:
        raise NotFoundError("Type d'appareil introuvable.")
    db.delete(device_type)
    db.commit()

"""
Router du catalogue de problèmes types proposés lors de la saisie d'un ticket.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import get_current_user, require_admin
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.issue import IssueCreate, IssueResponse
from ticketing.services import catalog_service

router = APIRouter(prefix="/api/v1/issues", tags=["Catalogue"])


@router.get("", response_model=List[IssueResponse], summary="Lister les problèmes types")
def list_issues(
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(get_current_user),
):
    return catalog_service.get_issues(db, category, search)


@router.post("", response_model=IssueResponse, status_code=201, summary="Ajouter un problème type")
def create_issue(
    data: IssueCreate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return catalog_service.create_issue(db, data)


@router.delete("/{issue_id}", status_code=204, summary="Supprimer un problème type")
def delete_issue(
    issue_id: int,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    catalog_service.delete_issue(db, issue_id)

"""
Router du catalogue des types d'appareils (proposés lors de la composition d'un lot).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.dependencies import get_current_user, require_admin
from ticketing.schemas.auth import TokenClaims
from ticketing.schemas.batch import DeviceTypeCreate, DeviceTypeResponse
from ticketing.services import catalog_service

router = APIRouter(prefix="/api/v1/device-types", tags=["Catalogue"])


@router.get("", response_model=List[DeviceTypeResponse], summary="Lister les types d'appareils")
def list_device_types(
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(get_current_user),
):
    return catalog_service.get_device_types(db)


@router.post("", response_model=DeviceTypeResponse, status_code=201, summary="Ajouter un type d'appareil")
def create_device_type(
    data: DeviceTypeCreate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    return catalog_service.create_device_type(db, data)


@router.delete("/{name}", status_code=204, summary="Supprimer un type d'appareil")
def delete_device_type(
    name: str,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(require_admin),
):
    catalog_service.delete_device_type(db, name)

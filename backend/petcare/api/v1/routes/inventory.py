"""Module: inventory."""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_db, require_roles
from petcare.db.models.user import UserRole
from petcare.schemas.inventory import InventoryItemCreate, InventoryItemRead, InventoryItemUpdate
from petcare.services.inventory import InventoryService

# Clinic stock is admin-only.
router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN))])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    return InventoryService(db)


@router.get("", response_model=list[InventoryItemRead], summary="List or search inventory items")
def list_items(
    search: str | None = Query(default=None),
    service: InventoryService = Depends(get_inventory_service),
):
    return [InventoryItemRead.model_validate(i) for i in service.list_items(search)]


@router.get("/{item_id}", response_model=InventoryItemRead, summary="Get inventory item")
def get_item(item_id: uuid.UUID, service: InventoryService = Depends(get_inventory_service)):
    return InventoryItemRead.model_validate(service.get_item(item_id))


@router.post(
    "",
    response_model=InventoryItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create inventory item",
)
def create_item(payload: InventoryItemCreate, service: InventoryService = Depends(get_inventory_service)):
    return InventoryItemRead.model_validate(service.create_item(payload))


@router.put("/{item_id}", response_model=InventoryItemRead, summary="Update inventory item")
def update_item(
    item_id: uuid.UUID,
    payload: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    return InventoryItemRead.model_validate(service.update_item(item_id, payload))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete inventory item")
def delete_item(item_id: uuid.UUID, service: InventoryService = Depends(get_inventory_service)):
    service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

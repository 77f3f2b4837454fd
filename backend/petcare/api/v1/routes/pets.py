"""Module: pets."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, require_roles
from petcare.db.models.user import UserRole
from petcare.schemas.pets import PetCreate, PetRead, PetUpdate
from petcare.services.identity import Principal
from petcare.services.pets import PetService

router = APIRouter()


def get_pet_service(db: Session = Depends(get_db)) -> PetService:
    return PetService(db)


# Endpoint: admins and vets see every pet, owners only their own.
@router.get("", response_model=list[PetRead], summary="List pets")
def list_pets(
    limit: int = Query(default=200, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    caller: Principal = Depends(get_current_user),
    pets: PetService = Depends(get_pet_service),
):
    return [PetRead.model_validate(p) for p in pets.list_for_caller(caller, limit=limit, offset=offset)]


@router.get("/my", response_model=list[PetRead], summary="List my pets")
def list_my_pets(
    caller: Principal = Depends(require_roles(UserRole.OWNER)),
    pets: PetService = Depends(get_pet_service),
):
    return [PetRead.model_validate(p) for p in pets.list_mine(caller)]


@router.post("", response_model=PetRead, status_code=status.HTTP_201_CREATED, summary="Register pet")
def create_pet(
    payload: PetCreate,
    caller: Principal = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
    pets: PetService = Depends(get_pet_service),
):
    return PetRead.model_validate(pets.create_pet(payload, caller))


@router.get("/{pet_id}", response_model=PetRead, summary="Get pet")
def get_pet(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    pets: PetService = Depends(get_pet_service),
):
    return PetRead.model_validate(pets.get_for_caller(pet_id, caller))


@router.put("/{pet_id}", response_model=PetRead, summary="Update pet")
def update_pet(
    pet_id: uuid.UUID,
    payload: PetUpdate,
    caller: Principal = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
    pets: PetService = Depends(get_pet_service),
):
    return PetRead.model_validate(pets.update_pet(pet_id, payload, caller))

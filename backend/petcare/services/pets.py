"""Module: pets."""

import logging
import uuid

from sqlalchemy.orm import Session

from petcare.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from petcare.db.models.pet import Pet
from petcare.db.models.user import UserRole
from petcare.repositories.pets import PetRepository
from petcare.repositories.users import UserRepository
from petcare.schemas.pets import PetCreate, PetUpdate
from petcare.services.identity import Principal

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class PetService:
    def __init__(self, db: Session):
        self.db = db
        self.pets = PetRepository(db)

    def is_owner(self, pet_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return self.pets.is_owner(pet_id, user_id)

    def get_pet(self, pet_id: uuid.UUID) -> Pet:
        pet = self.pets.get_by_id(pet_id)
        if pet is None:
            raise NotFoundError("Pet not found", details={"petId": str(pet_id)})
        return pet

    def get_for_caller(self, pet_id: uuid.UUID, caller: Principal) -> Pet:
        pet = self.get_pet(pet_id)
        self.ensure_can_read(pet, caller)
        return pet

    # Owners see their own pets; vets and admins see every pet.
    def ensure_can_read(self, pet: Pet, caller: Principal) -> None:
        if caller.has_role(UserRole.ADMIN, UserRole.VET):
            return
        if pet.owner_user_id != caller.user_id:
            raise ForbiddenError("You do not have access to this pet")

    def list_for_caller(self, caller: Principal, limit: int = 200, offset: int = 0) -> list[Pet]:
        if caller.has_role(UserRole.ADMIN, UserRole.VET):
            return self.pets.list_all(limit=limit, offset=offset)
        return self.pets.list_by_owner(caller.user_id)

    def list_mine(self, caller: Principal) -> list[Pet]:
        return self.pets.list_by_owner(caller.user_id)

    def create_pet(self, payload: PetCreate, caller: Principal) -> Pet:
        owner_user_id = caller.user_id
        if payload.owner_user_id is not None and payload.owner_user_id != caller.user_id:
            if not caller.is_admin:
                raise ForbiddenError("Only admins can register pets for another owner")
            owner = UserRepository(self.db).get_by_id(payload.owner_user_id)
            if owner is None:
                raise NotFoundError("Owner not found", details={"ownerUserId": str(payload.owner_user_id)})
            if owner.role != UserRole.OWNER:
                raise ValidationFailedError.for_field("ownerUserId", "User is not a pet owner")
            owner_user_id = owner.user_id

        pet = self.pets.create(
            Pet(
                owner_user_id=owner_user_id,
                name=payload.name,
                species=payload.species,
                breed=_clean(payload.breed),
                date_of_birth=payload.date_of_birth,
            )
        )
        self.db.commit()
        logger.info("Pet %s registered for owner %s", pet.pet_id, owner_user_id)
        return pet

    def update_pet(self, pet_id: uuid.UUID, payload: PetUpdate, caller: Principal) -> Pet:
        pet = self.get_pet(pet_id)
        if not caller.is_admin and pet.owner_user_id != caller.user_id:
            raise ForbiddenError("You can only update your own pets")

        if payload.name is not None:
            pet.name = payload.name
        if payload.species is not None:
            pet.species = payload.species
        if "breed" in payload.model_fields_set:
            pet.breed = _clean(payload.breed)
        if "date_of_birth" in payload.model_fields_set:
            pet.date_of_birth = payload.date_of_birth
        if payload.is_active is not None:
            pet.is_active = payload.is_active

        self.db.commit()
        return pet

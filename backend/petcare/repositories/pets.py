"""Module: pets repository."""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from petcare.db.models.pet import Pet


class PetRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, pet_id: uuid.UUID) -> Pet | None:
        return self.db.execute(select(Pet).where(Pet.pet_id == pet_id)).scalar_one_or_none()

    def list_by_owner(self, owner_user_id: uuid.UUID) -> list[Pet]:
        stmt = select(Pet).where(Pet.owner_user_id == owner_user_id).order_by(Pet.name.asc())
        return list(self.db.execute(stmt).scalars().all())

    def list_all(self, limit: int = 200, offset: int = 0) -> list[Pet]:
        stmt = select(Pet).order_by(Pet.created_at.desc()).offset(offset).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def create(self, pet: Pet) -> Pet:
        self.db.add(pet)
        self.db.flush()
        return pet

    # Pet-ownership lookup used for access checks across the app.
    def is_owner(self, pet_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        linked = self.db.execute(
            select(Pet.pet_id).where(Pet.pet_id == pet_id, Pet.owner_user_id == user_id)
        ).scalar_one_or_none()
        return linked is not None

"""Module: pet schemas."""

import uuid
from datetime import date, datetime

from pydantic import Field

from petcare.schemas.base import CamelModel, NonBlankStr


class PetCreate(CamelModel):
    name: NonBlankStr = Field(max_length=100)
    species: NonBlankStr = Field(max_length=50)
    breed: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None
    # Admins may register a pet on behalf of an owner.
    owner_user_id: uuid.UUID | None = None


class PetUpdate(CamelModel):
    name: NonBlankStr | None = Field(default=None, max_length=100)
    species: NonBlankStr | None = Field(default=None, max_length=50)
    breed: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None
    is_active: bool | None = None


class PetRead(CamelModel):
    pet_id: uuid.UUID = Field(alias="id")
    owner_user_id: uuid.UUID
    name: str
    species: str
    breed: str | None = None
    date_of_birth: date | None = None
    is_active: bool
    created_at: datetime | None = None

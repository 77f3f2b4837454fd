"""Module: user schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from petcare.db.models.user import AccountStatus, UserRole
from petcare.schemas.base import CamelModel, NonBlankStr


class UserRead(CamelModel):
    user_id: uuid.UUID = Field(alias="id")
    email: str
    full_name: str
    phone: str | None = None
    role: UserRole
    account_status: AccountStatus
    created_at: datetime | None = None


class ProfileUpdate(CamelModel):
    full_name: NonBlankStr = Field(max_length=200)
    phone: str | None = Field(default=None, max_length=40)


class VetCreate(CamelModel):
    full_name: NonBlankStr = Field(max_length=200)
    email: str = Field(min_length=3, max_length=320)
    password: str


class RoleUpdate(CamelModel):
    role: UserRole


class StatusUpdate(CamelModel):
    account_status: AccountStatus = Field(alias="status")

"""Module: auth schemas."""

from datetime import datetime

from pydantic import Field

from petcare.schemas.base import CamelModel, NonBlankStr
from petcare.schemas.pets import PetCreate
from petcare.schemas.users import UserRead


class LoginRequest(CamelModel):
    email: str
    password: str


class RegisterOwnerRequest(CamelModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=8)
    full_name: NonBlankStr = Field(max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    # Optional first pet registered together with the account.
    pet: PetCreate | None = None


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead

"""Module: inventory schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from petcare.schemas.base import CamelModel, NonBlankStr


class InventoryItemCreate(CamelModel):
    name: NonBlankStr = Field(max_length=200)
    quantity: int = Field(ge=0)
    category: NonBlankStr = Field(max_length=100)
    supplier: NonBlankStr = Field(max_length=200)
    expiry_date: datetime | None = None
    description: str | None = None


class InventoryItemUpdate(InventoryItemCreate):
    pass


class InventoryItemRead(CamelModel):
    item_id: uuid.UUID = Field(alias="id")
    name: str
    quantity: int
    category: str
    supplier: str
    expiry_date: datetime | None = None
    description: str | None = None

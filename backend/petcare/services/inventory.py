"""Module: inventory."""

import logging
import uuid

from sqlalchemy.orm import Session

from petcare.core.errors import ConflictError, NotFoundError
from petcare.core.timeutils import to_naive_utc
from petcare.db.models.inventory_item import InventoryItem
from petcare.repositories.inventory import InventoryRepository
from petcare.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, db: Session):
        self.db = db
        self.items = InventoryRepository(db)

    def list_items(self, search: str | None = None) -> list[InventoryItem]:
        if search and search.strip():
            return self.items.search(search)
        return self.items.list_all()

    def get_item(self, item_id: uuid.UUID) -> InventoryItem:
        item = self.items.get_by_id(item_id)
        if item is None:
            raise NotFoundError("Inventory item not found", details={"itemId": str(item_id)})
        return item

    def _ensure_name_free(self, name: str, exclude_item_id: uuid.UUID | None = None) -> None:
        if self.items.name_taken(name, exclude_item_id):
            raise ConflictError(
                f"An inventory item named '{name}' already exists",
                details={"name": name},
            )

    def create_item(self, payload: InventoryItemCreate) -> InventoryItem:
        self._ensure_name_free(payload.name)
        item = self.items.add(
            InventoryItem(
                name=payload.name,
                quantity=payload.quantity,
                category=payload.category,
                supplier=payload.supplier,
                expiry_date=to_naive_utc(payload.expiry_date),
                description=payload.description,
            )
        )
        self.db.commit()
        logger.info("Inventory item %s created (%s)", item.item_id, item.name)
        return item

    def update_item(self, item_id: uuid.UUID, payload: InventoryItemUpdate) -> InventoryItem:
        item = self.get_item(item_id)
        self._ensure_name_free(payload.name, exclude_item_id=item.item_id)
        item.name = payload.name
        item.quantity = payload.quantity
        item.category = payload.category
        item.supplier = payload.supplier
        item.expiry_date = to_naive_utc(payload.expiry_date)
        item.description = payload.description
        self.db.commit()
        return item

    def delete_item(self, item_id: uuid.UUID) -> None:
        item = self.get_item(item_id)
        self.items.delete(item)
        self.db.commit()
        logger.info("Inventory item %s deleted", item_id)

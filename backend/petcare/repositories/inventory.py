"""Module: inventory repository."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petcare.db.models.inventory_item import InventoryItem

LIKE_ESCAPE = "\\"


# User input is matched literally; % and _ are not wildcards.
def _escape_like(term: str) -> str:
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


class InventoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> list[InventoryItem]:
        return list(self.db.execute(select(InventoryItem).order_by(InventoryItem.name.asc())).scalars().all())

    def search(self, term: str) -> list[InventoryItem]:
        pattern = f"%{_escape_like(term.strip().lower())}%"
        stmt = (
            select(InventoryItem)
            .where(func.lower(InventoryItem.name).like(pattern, escape=LIKE_ESCAPE))
            .order_by(InventoryItem.name.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, item_id: uuid.UUID) -> InventoryItem | None:
        return self.db.get(InventoryItem, item_id)

    def name_taken(self, name: str, exclude_item_id: uuid.UUID | None = None) -> bool:
        stmt = select(InventoryItem.item_id).where(
            func.lower(func.trim(InventoryItem.name)) == name.strip().lower()
        )
        if exclude_item_id is not None:
            stmt = stmt.where(InventoryItem.item_id != exclude_item_id)
        return self.db.execute(stmt.limit(1)).first() is not None

    def add(self, item: InventoryItem) -> InventoryItem:
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: InventoryItem) -> None:
        self.db.delete(item)
        self.db.flush()

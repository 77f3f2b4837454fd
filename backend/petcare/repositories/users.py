"""Module: users repository."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petcare.db.models.user import User, UserRole


def normalize_email(value: str) -> str:
    return value.strip().lower()


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.db.execute(select(User).where(User.user_id == user_id)).scalar_one_or_none()

    def get_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        ).scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        return self.db.execute(
            select(User.user_id).where(func.lower(User.email) == normalize_email(email))
        ).first() is not None

    def list_users(self, role: UserRole | None = None) -> list[User]:
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list(self.db.execute(stmt.order_by(User.full_name.asc())).scalars().all())

    def get_many(self, user_ids: set[uuid.UUID]) -> dict[uuid.UUID, User]:
        if not user_ids:
            return {}
        rows = self.db.execute(select(User).where(User.user_id.in_(user_ids))).scalars().all()
        return {user.user_id: user for user in rows}

    def create(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

"""Module: deps."""

from typing import Callable, Generator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from petcare.core.config import Settings
from petcare.core.errors import ForbiddenError, UnauthorizedError
from petcare.db.models.user import UserRole
from petcare.services.identity import IdentityService, Principal


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


# Dependency provider: one DB session per request lifecycle.
def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise UnauthorizedError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise UnauthorizedError("Invalid Authorization header")

    return parts[1].strip()


def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> Principal:
    token = _bearer_token(authorization)
    return IdentityService(db, settings).resolve_token(token)


# Role guard: Depends(require_roles(UserRole.ADMIN, ...)).
def require_roles(*roles: UserRole) -> Callable[..., Principal]:
    allowed = ", ".join(role.value for role in roles)

    def guard(caller: Principal = Depends(get_current_user)) -> Principal:
        if not caller.has_role(*roles):
            raise ForbiddenError(f"Requires role: {allowed}")
        return caller

    return guard

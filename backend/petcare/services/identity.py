"""Module: identity.

Explicit credential-and-role service. The rest of the app only needs to know
who the caller is and which role they hold; everything about accounts,
password hashes and bearer tokens stays here.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from petcare.core.config import Settings
from petcare.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from petcare.core.security import create_access_token, decode_access_token, hash_password, verify_password
from petcare.db.models.pet import Pet
from petcare.db.models.user import AccountStatus, User, UserRole
from petcare.repositories.users import UserRepository, normalize_email
from petcare.schemas.pets import PetCreate

logger = logging.getLogger(__name__)

MIN_VET_PASSWORD_LENGTH = 8
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by the rest of the application."""

    user_id: uuid.UUID
    roles: frozenset[UserRole]

    def has_role(self, *roles: UserRole) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN in self.roles

    @property
    def is_vet(self) -> bool:
        return UserRole.VET in self.roles

    @property
    def is_owner(self) -> bool:
        return UserRole.OWNER in self.roles


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.user_id, roles=frozenset({user.role}))


def validate_email(email: str) -> str:
    normalized = normalize_email(email)
    if not _EMAIL_RE.match(normalized):
        raise ValidationFailedError.for_field("email", "A valid email address is required")
    return normalized


def validate_vet_password(password: str) -> None:
    if len(password) < MIN_VET_PASSWORD_LENGTH:
        raise ValidationFailedError.for_field(
            "password", f"Password must be at least {MIN_VET_PASSWORD_LENGTH} characters"
        )
    if not any(ch.isalpha() for ch in password) or not any(ch.isdigit() for ch in password):
        raise ValidationFailedError.for_field("password", "Password must contain at least one letter and one digit")


class IdentityService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)

    # Credentials and tokens
    def authenticate(self, email: str, password: str) -> Principal:
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", normalize_email(email))
            raise UnauthorizedError("Invalid email or password")
        if user.account_status != AccountStatus.ACTIVE:
            raise ForbiddenError(f"Account is {user.account_status.value.lower()}")
        return principal_for(user)

    def issue_token(self, principal: Principal) -> tuple[str, datetime]:
        role = next(iter(principal.roles))
        return create_access_token(self.settings, str(principal.user_id), role.value)

    def resolve_token(self, token: str) -> Principal:
        claims = decode_access_token(self.settings, token)
        if not claims or "sub" not in claims:
            raise UnauthorizedError("Invalid or expired token")
        try:
            user_id = uuid.UUID(claims["sub"])
        except ValueError:
            raise UnauthorizedError("Invalid or expired token")

        user = self.users.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User no longer exists")
        if user.account_status != AccountStatus.ACTIVE:
            raise ForbiddenError(f"Account is {user.account_status.value.lower()}")
        # Role comes from the store so role changes apply without a new login.
        return principal_for(user)

    # Directory lookups
    def find_by_email(self, email: str) -> User | None:
        return self.users.get_by_email(email)

    def get_user(self, user_id: uuid.UUID) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", details={"userId": str(user_id)})
        return user

    def list_users(self, role: UserRole | None = None) -> list[User]:
        return self.users.list_users(role)

    def display_name(self, user_id: uuid.UUID | None) -> str | None:
        if user_id is None:
            return None
        user = self.users.get_by_id(user_id)
        return user.full_name if user else None

    def display_names(self, user_ids: set[uuid.UUID]) -> dict[uuid.UUID, str]:
        return {uid: user.full_name for uid, user in self.users.get_many(user_ids).items()}

    # Account management
    def register_owner(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: str | None = None,
        pet: PetCreate | None = None,
    ) -> User:
        normalized = validate_email(email)
        if self.users.email_exists(normalized):
            raise ConflictError("Email already registered", details={"email": normalized})

        user = self.users.create(
            User(
                email=normalized,
                password_hash=hash_password(password),
                role=UserRole.OWNER,
                account_status=AccountStatus.ACTIVE,
                full_name=full_name.strip(),
                phone=(phone or "").strip() or None,
            )
        )

        if pet is not None:
            self.db.add(
                Pet(
                    owner_user_id=user.user_id,
                    name=pet.name.strip(),
                    species=pet.species.strip(),
                    breed=(pet.breed or "").strip() or None,
                    date_of_birth=pet.date_of_birth,
                )
            )

        self.db.commit()
        logger.info("Registered owner %s (%s)", user.user_id, user.email)
        return user

    def create_vet(self, full_name: str, email: str, password: str) -> User:
        normalized = validate_email(email)
        validate_vet_password(password)
        if self.users.email_exists(normalized):
            raise ConflictError("Email already registered", details={"email": normalized})

        user = self.users.create(
            User(
                email=normalized,
                password_hash=hash_password(password),
                role=UserRole.VET,
                account_status=AccountStatus.ACTIVE,
                full_name=full_name.strip(),
            )
        )
        self.db.commit()
        logger.info("Created vet account %s (%s)", user.user_id, user.email)
        return user

    def assign_role(self, user_id: uuid.UUID, role: UserRole) -> User:
        user = self.get_user(user_id)
        user.role = role
        self.db.commit()
        logger.info("Assigned role %s to user %s", role.value, user_id)
        return user

    def set_status(self, user_id: uuid.UUID, status: AccountStatus) -> User:
        user = self.get_user(user_id)
        user.account_status = status
        self.db.commit()
        logger.info("Account %s is now %s", user_id, status.value)
        return user

    def update_profile(self, user_id: uuid.UUID, full_name: str, phone: str | None = None) -> User:
        user = self.get_user(user_id)
        user.full_name = full_name.strip()
        user.phone = (phone or "").strip() or None
        self.db.commit()
        return user

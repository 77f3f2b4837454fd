"""
Pytest configuration and fixtures for the PetCare API tests.

Every test gets its own application bound to a fresh in-memory SQLite
database, plus users of each role, a pet, and bearer-token helpers.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from petcare.core import security
from petcare.core.config import Settings
from petcare.core.security import create_access_token, hash_password
from petcare.core.timeutils import utcnow
from petcare.db.models import AccountStatus, Pet, User, UserRole
from petcare.main import create_app
from petcare.schemas.appointments import AppointmentCreate
from petcare.services.appointments import AppointmentService
from petcare.services.identity import principal_for

DEFAULT_PASSWORD = "Passw0rd123"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Keep PBKDF2 cheap in tests; stored hashes carry their own iteration count."""
    monkeypatch.setattr(security, "PASSWORD_ITERATIONS", 1000)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret="test-secret",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    """Session bound to the same in-memory database the app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(
        role: UserRole,
        full_name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        account_status: AccountStatus = AccountStatus.ACTIVE,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value.lower()}{counter['n']}@petcare.test",
            password_hash=hash_password(password),
            role=role,
            account_status=account_status,
            full_name=full_name or f"{role.value.title()} {counter['n']}",
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN, full_name="Alex Admin")


@pytest.fixture
def vet(make_user) -> User:
    return make_user(UserRole.VET, full_name="Dr. Vera Vet")


@pytest.fixture
def other_vet(make_user) -> User:
    return make_user(UserRole.VET, full_name="Dr. Sam Second")


@pytest.fixture
def owner(make_user) -> User:
    return make_user(UserRole.OWNER, full_name="Olive Owner")


@pytest.fixture
def other_owner(make_user) -> User:
    return make_user(UserRole.OWNER, full_name="Oscar Other")


@pytest.fixture
def pet(db, owner) -> Pet:
    pet = Pet(owner_user_id=owner.user_id, name="Biscuit", species="Dog", breed="Kelpie", date_of_birth=date(2020, 3, 1))
    db.add(pet)
    db.commit()
    return pet


@pytest.fixture
def auth_headers(settings):
    def _headers(user: User) -> dict[str, str]:
        token, _ = create_access_token(settings, str(user.user_id), user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def appointment_service(db, settings) -> AppointmentService:
    return AppointmentService(db, settings)


@pytest.fixture
def request_appointment(appointment_service, owner, pet):
    """Book a pending appointment for the default pet, ``days_ahead`` from now."""

    def _request(days_ahead: float = 3, hour: int = 10, minute: int = 0, reason: str = "Checkup"):
        when = (utcnow() + timedelta(days=days_ahead)).replace(hour=hour, minute=minute, second=0, microsecond=0)
        if when <= utcnow():
            when += timedelta(days=1)
        payload = AppointmentCreate(pet_id=pet.pet_id, requested_datetime=when, reason_for_visit=reason)
        return appointment_service.request_appointment(payload, principal_for(owner))

    return _request

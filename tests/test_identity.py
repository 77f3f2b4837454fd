"""
Tests for the identity service and the auth/user endpoints.
"""

import pytest

from petcare.core.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationFailedError
from petcare.core.security import create_access_token, decode_access_token, hash_password, verify_password
from petcare.db.models import AccountStatus, Pet, UserRole
from petcare.schemas.pets import PetCreate
from petcare.services.identity import IdentityService, validate_vet_password

from conftest import DEFAULT_PASSWORD


@pytest.fixture
def identity(db, settings) -> IdentityService:
    return IdentityService(db, settings)


class TestPasswords:
    """Test PBKDF2 hashing helpers."""

    def test_hash_round_trip(self):
        stored = hash_password("s3cret-pass")
        assert stored.startswith("pbkdf2_sha256$")
        assert verify_password("s3cret-pass", stored)
        assert not verify_password("wrong", stored)

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("anything", "plaintext")
        assert not verify_password("anything", "pbkdf2_sha256$abc$zz$zz")

    @pytest.mark.parametrize("password", ["short1", "lettersonly", "12345678901"])
    def test_vet_password_policy_rejects(self, password):
        with pytest.raises(ValidationFailedError):
            validate_vet_password(password)

    def test_vet_password_policy_accepts(self):
        validate_vet_password("Vetpass1")


class TestTokens:
    """Test JWT issue/decode."""

    def test_token_claims(self, settings):
        token, expires_at = create_access_token(settings, "user-1", "VET")
        claims = decode_access_token(settings, token)

        assert claims["sub"] == "user-1"
        assert claims["role"] == "VET"
        assert expires_at.tzinfo is None

    def test_token_signed_with_other_secret_is_rejected(self, settings):
        other = settings.model_copy(update={"jwt_secret": "another-secret"})
        token, _ = create_access_token(other, "user-1", "VET")
        assert decode_access_token(settings, token) is None


class TestAuthenticate:
    """Test credential checks."""

    def test_valid_credentials(self, identity, owner):
        principal = identity.authenticate(owner.email.upper(), DEFAULT_PASSWORD)
        assert principal.user_id == owner.user_id
        assert principal.roles == frozenset({UserRole.OWNER})

    def test_wrong_password(self, identity, owner):
        with pytest.raises(UnauthorizedError):
            identity.authenticate(owner.email, "nope")

    def test_unknown_email(self, identity):
        with pytest.raises(UnauthorizedError):
            identity.authenticate("ghost@petcare.test", DEFAULT_PASSWORD)

    def test_suspended_account(self, identity, make_user):
        user = make_user(UserRole.OWNER, account_status=AccountStatus.SUSPENDED)
        with pytest.raises(ForbiddenError):
            identity.authenticate(user.email, DEFAULT_PASSWORD)

    def test_role_change_applies_to_existing_token(self, identity, owner):
        principal = identity.authenticate(owner.email, DEFAULT_PASSWORD)
        token, _ = identity.issue_token(principal)

        identity.assign_role(owner.user_id, UserRole.VET)

        assert identity.resolve_token(token).roles == frozenset({UserRole.VET})


class TestAccounts:
    """Test owner registration and vet provisioning."""

    def test_register_owner_with_pet(self, db, identity):
        user = identity.register_owner(
            "New.Owner@Example.com", "Password1", "New Owner", pet=PetCreate(name="Milo", species="Cat")
        )

        assert user.email == "new.owner@example.com"
        assert user.role == UserRole.OWNER
        pets = db.query(Pet).filter(Pet.owner_user_id == user.user_id).all()
        assert [p.name for p in pets] == ["Milo"]

    def test_duplicate_email_conflicts(self, identity, owner):
        with pytest.raises(ConflictError):
            identity.register_owner(owner.email.upper(), "Password1", "Copycat")

    def test_create_vet(self, identity):
        vet = identity.create_vet("Dr. New", "dr.new@petcare.test", "Vetpass1")
        assert vet.role == UserRole.VET
        assert [u.user_id for u in identity.list_users(UserRole.VET)] == [vet.user_id]

    def test_invalid_email(self, identity):
        with pytest.raises(ValidationFailedError):
            identity.create_vet("Dr. New", "not-an-email", "Vetpass1")

    def test_display_name(self, identity, vet):
        assert identity.display_name(vet.user_id) == "Dr. Vera Vet"
        assert identity.display_name(None) is None


class TestAuthApi:
    """Test the auth and admin user endpoints."""

    def test_register_then_login_then_me(self, client):
        registered = client.post(
            "/api/v1/auth/register-owner",
            json={
                "email": "pat@example.com",
                "password": "Password1",
                "fullName": "Pat Owner",
                "pet": {"name": "Rex", "species": "Dog"},
            },
        )
        assert registered.status_code == 201
        assert registered.json()["role"] == "OWNER"

        login = client.post("/api/v1/auth/login", json={"email": "pat@example.com", "password": "Password1"})
        assert login.status_code == 200
        token = login.json()["accessToken"]

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["fullName"] == "Pat Owner"

        pets = client.get("/api/v1/pets/my", headers={"Authorization": f"Bearer {token}"})
        assert [p["name"] for p in pets.json()] == ["Rex"]

    def test_bad_login(self, client, owner):
        response = client.post("/api/v1/auth/login", json={"email": owner.email, "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["code"] == "unauthorized"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401

    def test_admin_creates_vet(self, client, auth_headers, admin):
        response = client.post(
            "/api/v1/admin/users/vets",
            json={"fullName": "Dr. Api", "email": "dr.api@petcare.test", "password": "Vetpass1"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        vets = client.get("/api/v1/admin/users/vets", headers=auth_headers(admin)).json()
        assert [v["email"] for v in vets] == ["dr.api@petcare.test"]

    def test_weak_vet_password_reports_field(self, client, auth_headers, admin):
        response = client.post(
            "/api/v1/admin/users/vets",
            json={"fullName": "Dr. Weak", "email": "weak@petcare.test", "password": "password"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 422
        assert response.json()["details"]["fields"][0]["field"] == "password"

    def test_owner_cannot_manage_users(self, client, auth_headers, owner):
        response = client.get("/api/v1/admin/users", headers=auth_headers(owner))
        assert response.status_code == 403

    def test_suspend_blocks_existing_token(self, client, auth_headers, admin, owner):
        headers = auth_headers(owner)
        suspended = client.put(
            f"/api/v1/admin/users/{owner.user_id}/status", json={"status": "Suspended"}, headers=auth_headers(admin)
        )
        assert suspended.json()["accountStatus"] == "Suspended"

        assert client.get("/api/v1/auth/me", headers=headers).status_code == 403

    def test_update_profile(self, client, auth_headers, owner):
        response = client.put(
            "/api/v1/users/me", json={"fullName": "Olive O.", "phone": " 0400 000 000 "}, headers=auth_headers(owner)
        )
        assert response.json()["fullName"] == "Olive O."
        assert response.json()["phone"] == "0400 000 000"

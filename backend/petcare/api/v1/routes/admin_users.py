"""Module: admin_users.

Account administration: vet provisioning, role and status changes.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from petcare.api.v1.routes.auth import get_identity_service
from petcare.api.v1.routes.deps import require_roles
from petcare.db.models.user import UserRole
from petcare.schemas.users import RoleUpdate, StatusUpdate, UserRead, VetCreate
from petcare.services.identity import IdentityService, Principal

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


@router.get("", response_model=list[UserRead], summary="List users, optionally by role")
def list_users(
    role: UserRole | None = Query(default=None),
    _: Principal = Depends(admin_only),
    identity: IdentityService = Depends(get_identity_service),
):
    return [UserRead.model_validate(u) for u in identity.list_users(role)]


@router.post(
    "/vets",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a veterinarian account",
)
def create_vet(
    payload: VetCreate,
    _: Principal = Depends(admin_only),
    identity: IdentityService = Depends(get_identity_service),
):
    user = identity.create_vet(payload.full_name, payload.email, payload.password)
    return UserRead.model_validate(user)


@router.get("/vets", response_model=list[UserRead], summary="List veterinarians")
def list_vets(
    _: Principal = Depends(admin_only),
    identity: IdentityService = Depends(get_identity_service),
):
    return [UserRead.model_validate(u) for u in identity.list_users(UserRole.VET)]


@router.put("/{user_id}/role", response_model=UserRead, summary="Change a user's role")
def assign_role(
    user_id: uuid.UUID,
    payload: RoleUpdate,
    _: Principal = Depends(admin_only),
    identity: IdentityService = Depends(get_identity_service),
):
    return UserRead.model_validate(identity.assign_role(user_id, payload.role))


@router.put("/{user_id}/status", response_model=UserRead, summary="Activate or suspend an account")
def set_account_status(
    user_id: uuid.UUID,
    payload: StatusUpdate,
    _: Principal = Depends(admin_only),
    identity: IdentityService = Depends(get_identity_service),
):
    return UserRead.model_validate(identity.set_status(user_id, payload.account_status))

"""Module: users."""

import uuid

from fastapi import APIRouter, Depends

from petcare.api.v1.routes.auth import get_identity_service
from petcare.api.v1.routes.deps import get_current_user, require_roles
from petcare.db.models.user import UserRole
from petcare.schemas.users import ProfileUpdate, UserRead
from petcare.services.identity import IdentityService, Principal

router = APIRouter()


@router.put("/me", response_model=UserRead, summary="Update my profile")
def update_my_profile(
    payload: ProfileUpdate,
    caller: Principal = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
):
    user = identity.update_profile(caller.user_id, payload.full_name, payload.phone)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, summary="Get user")
def get_user(
    user_id: uuid.UUID,
    _: Principal = Depends(require_roles(UserRole.ADMIN)),
    identity: IdentityService = Depends(get_identity_service),
):
    return UserRead.model_validate(identity.get_user(user_id))

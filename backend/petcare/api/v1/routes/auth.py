"""Module: auth."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep
from petcare.core.config import Settings
from petcare.schemas.auth import LoginRequest, LoginResponse, RegisterOwnerRequest
from petcare.schemas.users import UserRead
from petcare.services.identity import IdentityService, Principal

router = APIRouter()


def get_identity_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> IdentityService:
    return IdentityService(db, settings)


# Endpoint: self-service owner sign-up, optionally with a first pet.
@router.post(
    "/register-owner",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a pet owner",
)
def register_owner(payload: RegisterOwnerRequest, identity: IdentityService = Depends(get_identity_service)):
    user = identity.register_owner(
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        phone=payload.phone,
        pet=payload.pet,
    )
    return UserRead.model_validate(user)


@router.post("/login", response_model=LoginResponse, summary="Log in and receive a bearer token")
def login(payload: LoginRequest, identity: IdentityService = Depends(get_identity_service)):
    principal = identity.authenticate(payload.email, payload.password)
    token, expires_at = identity.issue_token(principal)
    return LoginResponse(
        access_token=token,
        expires_at=expires_at,
        user=UserRead.model_validate(identity.get_user(principal.user_id)),
    )


@router.get("/me", response_model=UserRead, summary="Current user")
def me(
    caller: Principal = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
):
    return UserRead.model_validate(identity.get_user(caller.user_id))

"""Module: prescriptions."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.user import UserRole
from petcare.schemas.medical_records import PrescriptionCreate, PrescriptionRead, PrescriptionUpdate
from petcare.services.identity import Principal
from petcare.services.medical_records import PrescriptionService

router = APIRouter()

clinician = require_roles(UserRole.VET, UserRole.ADMIN)


def get_prescription_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> PrescriptionService:
    return PrescriptionService(db, settings)


@router.post(
    "",
    response_model=PrescriptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create prescription",
)
def create_prescription(
    payload: PrescriptionCreate,
    caller: Principal = Depends(clinician),
    service: PrescriptionService = Depends(get_prescription_service),
):
    return service.to_dto(service.create(payload, caller))


@router.get("/pet/{pet_id}", response_model=list[PrescriptionRead], summary="List prescriptions for pet")
def list_for_pet(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: PrescriptionService = Depends(get_prescription_service),
):
    return service.to_dtos(service.list_for_pet(pet_id, caller))


@router.get(
    "/pet/{pet_id}/active",
    response_model=list[PrescriptionRead],
    summary="List active prescriptions for pet",
)
def list_active(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: PrescriptionService = Depends(get_prescription_service),
):
    return service.to_dtos(service.list_active(pet_id, caller))


@router.get("/{record_id}", response_model=PrescriptionRead, summary="Get prescription")
def get_prescription(
    record_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: PrescriptionService = Depends(get_prescription_service),
):
    return service.to_dto(service.get(record_id, caller))


@router.put("/{record_id}", response_model=PrescriptionRead, summary="Update prescription")
def update_prescription(
    record_id: uuid.UUID,
    payload: PrescriptionUpdate,
    caller: Principal = Depends(clinician),
    service: PrescriptionService = Depends(get_prescription_service),
):
    return service.to_dto(service.update(record_id, payload, caller))


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete prescription")
def delete_prescription(
    record_id: uuid.UUID,
    caller: Principal = Depends(clinician),
    service: PrescriptionService = Depends(get_prescription_service),
):
    service.delete(record_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Module: treatments."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.user import UserRole
from petcare.schemas.medical_records import TreatmentCreate, TreatmentHistoryReport, TreatmentRead, TreatmentUpdate
from petcare.services.identity import Principal
from petcare.services.medical_records import TreatmentService

router = APIRouter()

clinician = require_roles(UserRole.VET, UserRole.ADMIN)


def get_treatment_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> TreatmentService:
    return TreatmentService(db, settings)


@router.post(
    "",
    response_model=TreatmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create treatment",
)
def create_treatment(
    payload: TreatmentCreate,
    caller: Principal = Depends(clinician),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.to_dto(service.create(payload, caller))


@router.get("/pet/{pet_id}", response_model=list[TreatmentRead], summary="List treatments for pet")
def list_for_pet(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.to_dtos(service.list_for_pet(pet_id, caller))


@router.get(
    "/pet/{pet_id}/history",
    response_model=TreatmentHistoryReport,
    summary="Treatment history for pet",
)
def treatment_history(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.history(pet_id, caller)


@router.get("/{record_id}", response_model=TreatmentRead, summary="Get treatment")
def get_treatment(
    record_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.to_dto(service.get(record_id, caller))


@router.put("/{record_id}", response_model=TreatmentRead, summary="Update treatment")
def update_treatment(
    record_id: uuid.UUID,
    payload: TreatmentUpdate,
    caller: Principal = Depends(clinician),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.to_dto(service.update(record_id, payload, caller))


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete treatment")
def delete_treatment(
    record_id: uuid.UUID,
    caller: Principal = Depends(clinician),
    service: TreatmentService = Depends(get_treatment_service),
):
    service.delete(record_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Module: medical_records."""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.medical_record import MedicalRecordType
from petcare.db.models.user import UserRole
from petcare.schemas.medical_records import MedicalRecordCreate, MedicalRecordRead, MedicalRecordUpdate
from petcare.services.identity import Principal
from petcare.services.medical_records import MedicalRecordService

router = APIRouter()

clinician = require_roles(UserRole.VET, UserRole.ADMIN)


def get_medical_record_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> MedicalRecordService:
    return MedicalRecordService(db, settings)


@router.post(
    "",
    response_model=MedicalRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create medical record",
)
def create_medical_record(
    payload: MedicalRecordCreate,
    caller: Principal = Depends(clinician),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    return service.to_dto(service.create(payload, caller))


@router.get("/pet/{pet_id}", response_model=list[MedicalRecordRead], summary="List medical records for pet")
def list_for_pet(
    pet_id: uuid.UUID,
    record_type: MedicalRecordType | None = Query(default=None, alias="recordType"),
    caller: Principal = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    return service.to_dtos(service.list_for_pet(pet_id, caller, record_type))


@router.get("/{record_id}", response_model=MedicalRecordRead, summary="Get medical record")
def get_medical_record(
    record_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    return service.to_dto(service.get(record_id, caller))


@router.put("/{record_id}", response_model=MedicalRecordRead, summary="Update medical record")
def update_medical_record(
    record_id: uuid.UUID,
    payload: MedicalRecordUpdate,
    caller: Principal = Depends(clinician),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    return service.to_dto(service.update(record_id, payload, caller))


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete medical record")
def delete_medical_record(
    record_id: uuid.UUID,
    caller: Principal = Depends(clinician),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    service.delete(record_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Module: vaccinations."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.user import UserRole
from petcare.schemas.medical_records import VaccinationCreate, VaccinationRead, VaccinationReport, VaccinationUpdate
from petcare.services.identity import Principal
from petcare.services.medical_records import VaccinationService

router = APIRouter()

clinician = require_roles(UserRole.VET, UserRole.ADMIN)


def get_vaccination_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> VaccinationService:
    return VaccinationService(db, settings)


@router.post(
    "",
    response_model=VaccinationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create vaccination",
)
def create_vaccination(
    payload: VaccinationCreate,
    caller: Principal = Depends(clinician),
    service: VaccinationService = Depends(get_vaccination_service),
):
    return service.to_dto(service.create(payload, caller))


@router.get("/pet/{pet_id}", response_model=list[VaccinationRead], summary="List vaccinations for pet")
def list_for_pet(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: VaccinationService = Depends(get_vaccination_service),
):
    return service.to_dtos(service.list_for_pet(pet_id, caller))


# Endpoint: overdue/upcoming breakdown for the pet's vaccination card.
@router.get("/pet/{pet_id}/report", response_model=VaccinationReport, summary="Vaccination report for pet")
def vaccination_report(
    pet_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: VaccinationService = Depends(get_vaccination_service),
):
    return service.report(pet_id, caller)


@router.get("/{record_id}", response_model=VaccinationRead, summary="Get vaccination")
def get_vaccination(
    record_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: VaccinationService = Depends(get_vaccination_service),
):
    return service.to_dto(service.get(record_id, caller))


@router.put("/{record_id}", response_model=VaccinationRead, summary="Update vaccination")
def update_vaccination(
    record_id: uuid.UUID,
    payload: VaccinationUpdate,
    caller: Principal = Depends(clinician),
    service: VaccinationService = Depends(get_vaccination_service),
):
    return service.to_dto(service.update(record_id, payload, caller))


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete vaccination")
def delete_vaccination(
    record_id: uuid.UUID,
    caller: Principal = Depends(clinician),
    service: VaccinationService = Depends(get_vaccination_service),
):
    service.delete(record_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

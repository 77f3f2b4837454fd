"""Module: appointments.

Static paths are declared before ``/{appointment_id}`` so they are matched
first.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.appointment import AppointmentStatus
from petcare.db.models.user import UserRole
from petcare.schemas.appointments import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentRead,
    AppointmentStats,
    AppointmentStatusUpdate,
    AppointmentSummaryReport,
    CalendarSummary,
)
from petcare.services.appointments import AppointmentService, parse_status
from petcare.services.identity import Principal

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


def get_appointment_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> AppointmentService:
    return AppointmentService(db, settings)


def _status_filter(value: str | None) -> AppointmentStatus | None:
    return parse_status(value) if value else None


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request an appointment",
)
def request_appointment(
    payload: AppointmentCreate,
    caller: Principal = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dto(service.request_appointment(payload, caller))


@router.get("/my", response_model=list[AppointmentRead], summary="List my appointments")
def list_my_appointments(
    status_filter: str | None = Query(default=None, alias="status"),
    caller: Principal = Depends(require_roles(UserRole.OWNER)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dtos(service.list_mine(caller, _status_filter(status_filter)))


# Admin queue views
@router.get("", response_model=list[AppointmentRead], summary="List all appointments")
def list_appointments(
    status_filter: str | None = Query(default=None, alias="status"),
    _: Principal = Depends(admin_only),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dtos(service.list_all(_status_filter(status_filter)))


@router.get(
    "/pending",
    response_model=list[AppointmentRead],
    summary="List pending appointments (oldest first)",
)
def list_pending(
    _: Principal = Depends(admin_only),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dtos(service.list_pending())


# Vet views
@router.get("/assigned", response_model=list[AppointmentRead], summary="List appointments assigned to me")
def list_assigned(
    caller: Principal = Depends(require_roles(UserRole.VET, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dtos(service.list_assigned(caller))


@router.get("/approved", response_model=list[AppointmentRead], summary="List approved appointments")
def list_approved(
    caller: Principal = Depends(require_roles(UserRole.VET, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dtos(service.list_approved(caller))


# Dashboards
@router.get("/stats", response_model=AppointmentStats, summary="Appointment counts by status")
def appointment_stats(
    _: Principal = Depends(admin_only),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.stats()


@router.get(
    "/calendar-summary",
    response_model=CalendarSummary,
    summary="Per-day appointment counts for a month",
)
def calendar_summary(
    month: str = Query(..., description="YYYY-MM"),
    _: Principal = Depends(require_roles(UserRole.ADMIN, UserRole.VET)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.calendar_summary(month)


@router.get("/reports/summary", response_model=AppointmentSummaryReport, summary="Appointment summary report")
def summary_report(
    _: Principal = Depends(admin_only),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.summary_report()


@router.get("/{appointment_id}", response_model=AppointmentRead, summary="Get appointment")
def get_appointment(
    appointment_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dto(service.get_for_caller(appointment_id, caller))


# Endpoint: admin approval/cancellation through a single status update.
@router.put(
    "/{appointment_id}/status",
    response_model=AppointmentRead,
    summary="Approve or cancel an appointment",
)
def update_status(
    appointment_id: uuid.UUID,
    payload: AppointmentStatusUpdate,
    caller: Principal = Depends(admin_only),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dto(service.update_status(appointment_id, payload, caller))


@router.put("/{appointment_id}/cancel", response_model=AppointmentRead, summary="Cancel appointment")
def cancel_appointment(
    appointment_id: uuid.UUID,
    payload: AppointmentCancel | None = None,
    caller: Principal = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    reason = payload.reason if payload else None
    return service.to_dto(service.cancel(appointment_id, caller, reason))


@router.put(
    "/{appointment_id}/complete",
    response_model=AppointmentRead,
    summary="Mark appointment completed",
)
def complete_appointment(
    appointment_id: uuid.UUID,
    caller: Principal = Depends(require_roles(UserRole.VET, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dto(service.complete(appointment_id, caller))


@router.put(
    "/{appointment_id}/no-show",
    response_model=AppointmentRead,
    summary="Mark appointment as no-show",
)
def mark_no_show(
    appointment_id: uuid.UUID,
    caller: Principal = Depends(require_roles(UserRole.VET, UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.to_dto(service.mark_no_show(appointment_id, caller))

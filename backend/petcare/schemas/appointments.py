"""Module: appointment schemas."""

import uuid
from datetime import date, datetime

from pydantic import Field

from petcare.db.models.appointment import AppointmentStatus
from petcare.schemas.base import CamelModel, NonBlankStr


class AppointmentCreate(CamelModel):
    pet_id: uuid.UUID
    requested_datetime: datetime = Field(alias="requestedDateTime")
    reason_for_visit: NonBlankStr = Field(max_length=200)
    notes: str | None = Field(default=None, max_length=1000)


class AppointmentStatusUpdate(CamelModel):
    # Parsed by the workflow so unknown targets report a field error.
    status: str
    admin_notes: str | None = Field(default=None, max_length=1000)
    vet_user_id: uuid.UUID | None = None


class AppointmentCancel(CamelModel):
    reason: str | None = Field(default=None, max_length=1000)


class AppointmentRead(CamelModel):
    appointment_id: uuid.UUID = Field(alias="id")
    pet_id: uuid.UUID
    pet_name: str
    owner_user_id: uuid.UUID
    owner_name: str
    vet_user_id: uuid.UUID | None = None
    vet_name: str | None = None
    requested_datetime: datetime = Field(alias="requestedDateTime")
    actual_datetime: datetime | None = Field(default=None, alias="actualDateTime")
    reason_for_visit: str
    notes: str | None = None
    admin_notes: str | None = None
    status: AppointmentStatus
    status_display_name: str
    created_at: datetime
    updated_at: datetime | None = None
    can_be_cancelled: bool
    requires_action: bool


class AppointmentStats(CamelModel):
    pending: int
    approved: int
    cancelled: int
    completed: int
    no_show: int
    total: int
    today: int


class CalendarDay(CamelModel):
    day: date = Field(alias="date")
    count: int


class CalendarSummary(CamelModel):
    month: str
    days: list[CalendarDay]


class AppointmentSummaryReport(CamelModel):
    generated_at: datetime
    report_period: str

    upcoming_appointments_count: int
    upcoming_appointments: list[AppointmentRead]
    pending_appointments_count: int
    pending_appointments: list[AppointmentRead]
    past_appointments_count: int
    past_appointments: list[AppointmentRead]

    total_appointments_count: int
    completed_appointments_count: int
    cancelled_appointments_count: int
    no_show_appointments_count: int

    average_appointments_per_day: float
    busiest_day_of_week: str
    peak_appointment_hour: int

"""Module: appointments.

Appointment status workflow. Each command loads the appointment, checks the
caller and the allowed transition, commits the new state and only then
dispatches the resulting notifications.

    Pending  -> Approved | Cancelled
    Approved -> Cancelled | Completed | NoShow
"""

import calendar
import logging
import uuid
from collections import Counter
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from petcare.core.config import Settings
from petcare.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from petcare.core.timeutils import to_naive_utc, utcnow
from petcare.db.models.appointment import Appointment, AppointmentStatus
from petcare.db.models.user import UserRole
from petcare.repositories.appointments import AppointmentRepository
from petcare.schemas.appointments import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentStats,
    AppointmentStatusUpdate,
    AppointmentSummaryReport,
    CalendarDay,
    CalendarSummary,
)
from petcare.services.identity import IdentityService, Principal
from petcare.services.notifications import NotificationService
from petcare.services.pets import PetService

logger = logging.getLogger(__name__)

UNKNOWN_PET = "Unknown Pet"
UNKNOWN_OWNER = "Unknown Owner"
REPORT_SAMPLE_SIZE = 10
REPORT_WINDOW_DAYS = 30

# Targets accepted by the admin status endpoint.
STATUS_UPDATE_TARGETS = (AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED)


def _pet_name(appointment: Appointment) -> str:
    return appointment.pet.name if appointment.pet is not None else UNKNOWN_PET


def parse_status(value: str) -> AppointmentStatus:
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise ValidationFailedError.for_field("status", f"Unknown appointment status '{value}'")


class AppointmentService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.appointments = AppointmentRepository(db)
        self.pets = PetService(db)
        self.identity = IdentityService(db, settings)
        self.notifications = NotificationService(db, settings)

    # Lookups
    def get_appointment(self, appointment_id: uuid.UUID) -> Appointment:
        appointment = self.appointments.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found", details={"appointmentId": str(appointment_id)})
        return appointment

    def get_for_caller(self, appointment_id: uuid.UUID, caller: Principal) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if caller.has_role(UserRole.ADMIN, UserRole.VET):
            return appointment
        if appointment.owner_user_id != caller.user_id:
            raise ForbiddenError("You do not have access to this appointment")
        return appointment

    def list_mine(self, caller: Principal, status: AppointmentStatus | None = None) -> list[Appointment]:
        return self.appointments.list_by_owner(caller.user_id, status)

    def list_all(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        if status is not None:
            return self.appointments.list_by_status(status)
        return self.appointments.list_all()

    def list_pending(self) -> list[Appointment]:
        return self.appointments.list_pending()

    def list_assigned(self, caller: Principal) -> list[Appointment]:
        return self.appointments.list_by_vet(caller.user_id)

    def list_approved(self, caller: Principal) -> list[Appointment]:
        if caller.is_admin:
            return self.appointments.list_by_status(AppointmentStatus.APPROVED)
        return self.appointments.list_by_vet(caller.user_id, AppointmentStatus.APPROVED)

    # Commands
    def request_appointment(self, payload: AppointmentCreate, caller: Principal) -> Appointment:
        requested = to_naive_utc(payload.requested_datetime)
        if requested <= utcnow():
            raise ValidationFailedError.for_field("requestedDateTime", "Requested date and time must be in the future")

        pet = self.pets.get_pet(payload.pet_id)
        if not caller.is_admin and not self.pets.is_owner(pet.pet_id, caller.user_id):
            raise ForbiddenError("You can only book appointments for your own pets")

        appointment = self.appointments.create(
            Appointment(
                pet_id=pet.pet_id,
                owner_user_id=pet.owner_user_id,
                requested_datetime=requested,
                reason_for_visit=payload.reason_for_visit,
                notes=(payload.notes or "").strip() or None,
                status=AppointmentStatus.PENDING,
                created_at=utcnow(),
            )
        )
        self.db.commit()
        logger.info("Appointment %s requested for pet %s at %s", appointment.appointment_id, pet.pet_id, requested)
        return appointment

    def approve(
        self,
        appointment_id: uuid.UUID,
        caller: Principal,
        vet_user_id: uuid.UUID | None = None,
        admin_notes: str | None = None,
    ) -> Appointment:
        self._require_admin(caller, "approve appointments")
        appointment = self.get_appointment(appointment_id)
        self._ensure_transition(appointment, AppointmentStatus.APPROVED)

        vet = None
        if vet_user_id is not None:
            vet = self.identity.users.get_by_id(vet_user_id)
            if vet is None:
                raise NotFoundError("Veterinarian not found", details={"vetUserId": str(vet_user_id)})
            if vet.role != UserRole.VET:
                raise ValidationFailedError.for_field("vetUserId", "Assigned user is not a veterinarian")
            if self.appointments.has_conflict(
                appointment.requested_datetime,
                vet.user_id,
                self.settings.appointment_conflict_window_minutes,
                exclude_appointment_id=appointment.appointment_id,
            ):
                logger.warning(
                    "Approval of %s blocked: vet %s already booked near %s",
                    appointment.appointment_id,
                    vet.user_id,
                    appointment.requested_datetime,
                )
                raise ConflictError(
                    "The veterinarian already has an appointment at this time",
                    details={
                        "vetUserId": str(vet.user_id),
                        "requestedDateTime": appointment.requested_datetime.isoformat(),
                    },
                )
            appointment.vet_user_id = vet.user_id

        appointment.status = AppointmentStatus.APPROVED
        appointment.actual_datetime = appointment.requested_datetime
        if admin_notes is not None:
            appointment.admin_notes = admin_notes.strip() or None
        appointment.updated_by_user_id = caller.user_id
        self.appointments.update(appointment)
        self.db.commit()
        logger.info("Appointment %s approved by %s", appointment.appointment_id, caller.user_id)

        pet_name = _pet_name(appointment)
        self.notifications.notify_appointment_approved(appointment, pet_name, vet.full_name if vet else None)
        if vet is not None:
            owner_name = self.identity.display_name(appointment.owner_user_id) or UNKNOWN_OWNER
            self.notifications.notify_vet_assigned(appointment, pet_name, owner_name)
        return appointment

    def cancel(self, appointment_id: uuid.UUID, caller: Principal, reason: str | None = None) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if not caller.is_admin and appointment.owner_user_id != caller.user_id:
            raise ForbiddenError("Only an admin or the appointment owner can cancel it")
        self._ensure_transition(appointment, AppointmentStatus.CANCELLED)

        reason = (reason or "").strip() or None
        appointment.status = AppointmentStatus.CANCELLED
        if caller.is_admin and reason:
            appointment.admin_notes = reason
        appointment.updated_by_user_id = caller.user_id
        self.appointments.update(appointment)
        self.db.commit()
        logger.info("Appointment %s cancelled by %s", appointment.appointment_id, caller.user_id)

        self.notifications.notify_appointment_cancelled(appointment, _pet_name(appointment), reason)
        return appointment

    def update_status(
        self, appointment_id: uuid.UUID, payload: AppointmentStatusUpdate, caller: Principal
    ) -> Appointment:
        target = parse_status(payload.status)
        if target not in STATUS_UPDATE_TARGETS:
            raise ValidationFailedError.for_field("status", "Status can only be set to Approved or Cancelled")
        if target == AppointmentStatus.APPROVED:
            return self.approve(appointment_id, caller, payload.vet_user_id, payload.admin_notes)
        self._require_admin(caller, "update appointment status")
        return self.cancel(appointment_id, caller, payload.admin_notes)

    def complete(self, appointment_id: uuid.UUID, caller: Principal) -> Appointment:
        return self._close(appointment_id, caller, AppointmentStatus.COMPLETED)

    def mark_no_show(self, appointment_id: uuid.UUID, caller: Principal) -> Appointment:
        return self._close(appointment_id, caller, AppointmentStatus.NO_SHOW)

    def _close(self, appointment_id: uuid.UUID, caller: Principal, target: AppointmentStatus) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if not caller.is_admin and not (caller.is_vet and appointment.vet_user_id == caller.user_id):
            raise ForbiddenError("Only the assigned veterinarian or an admin can close this appointment")
        self._ensure_transition(appointment, target)

        appointment.status = target
        appointment.updated_by_user_id = caller.user_id
        self.appointments.update(appointment)
        self.db.commit()
        logger.info("Appointment %s marked %s by %s", appointment.appointment_id, target.value, caller.user_id)
        return appointment

    def _ensure_transition(self, appointment: Appointment, target: AppointmentStatus) -> None:
        if not appointment.can_transition_to(target):
            logger.warning(
                "Rejected transition %s -> %s for appointment %s",
                appointment.status.value,
                target.value,
                appointment.appointment_id,
            )
            raise InvalidStateError(
                f"Cannot change appointment from {appointment.status.value} to {target.value}",
                details={"currentStatus": appointment.status.value, "targetStatus": target.value},
            )

    @staticmethod
    def _require_admin(caller: Principal, action: str) -> None:
        if not caller.is_admin:
            raise ForbiddenError(f"Only admins can {action}")

    # Dashboards
    def stats(self) -> AppointmentStats:
        counts = self.appointments.counts_by_status()
        today_start = datetime.combine(utcnow().date(), datetime.min.time())
        return AppointmentStats(
            pending=counts[AppointmentStatus.PENDING],
            approved=counts[AppointmentStatus.APPROVED],
            cancelled=counts[AppointmentStatus.CANCELLED],
            completed=counts[AppointmentStatus.COMPLETED],
            no_show=counts[AppointmentStatus.NO_SHOW],
            total=sum(counts.values()),
            today=self.appointments.count_requested_on(today_start),
        )

    def calendar_summary(self, month: str) -> CalendarSummary:
        try:
            first = datetime.strptime(month, "%Y-%m")
        except ValueError:
            raise ValidationFailedError.for_field("month", "Month must be formatted as YYYY-MM")

        days_in_month = calendar.monthrange(first.year, first.month)[1]
        end = first + timedelta(days=days_in_month)
        per_day = Counter(a.requested_datetime.date() for a in self.appointments.list_requested_between(first, end))
        days = [
            CalendarDay(day=d, count=per_day.get(d, 0))
            for d in (date(first.year, first.month, n) for n in range(1, days_in_month + 1))
        ]
        return CalendarSummary(month=f"{first:%Y-%m}", days=days)

    def summary_report(self) -> AppointmentSummaryReport:
        now = utcnow()
        window_start = now - timedelta(days=REPORT_WINDOW_DAYS)
        everything = self.appointments.list_all()

        upcoming = [
            a for a in everything
            if a.requested_datetime > now and a.status in (AppointmentStatus.PENDING, AppointmentStatus.APPROVED)
        ]
        pending = [a for a in everything if a.status == AppointmentStatus.PENDING]
        terminal = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW)
        past = [
            a for a in everything
            if window_start <= a.requested_datetime <= now and a.status in terminal
        ]
        by_status = Counter(a.status for a in everything)
        recent_count = sum(1 for a in everything if a.requested_datetime >= window_start)
        weekdays = Counter(a.requested_datetime.strftime("%A") for a in everything)
        hours = Counter(a.requested_datetime.hour for a in everything)

        return AppointmentSummaryReport(
            generated_at=now,
            report_period=f"As of {now:%B %d, %Y}",
            upcoming_appointments_count=len(upcoming),
            upcoming_appointments=self.to_dtos(upcoming[:REPORT_SAMPLE_SIZE]),
            pending_appointments_count=len(pending),
            pending_appointments=self.to_dtos(pending[:REPORT_SAMPLE_SIZE]),
            past_appointments_count=len(past),
            past_appointments=self.to_dtos(past[:REPORT_SAMPLE_SIZE]),
            total_appointments_count=len(everything),
            completed_appointments_count=by_status[AppointmentStatus.COMPLETED],
            cancelled_appointments_count=by_status[AppointmentStatus.CANCELLED],
            no_show_appointments_count=by_status[AppointmentStatus.NO_SHOW],
            average_appointments_per_day=round(recent_count / REPORT_WINDOW_DAYS, 2),
            busiest_day_of_week=weekdays.most_common(1)[0][0] if weekdays else "N/A",
            peak_appointment_hour=hours.most_common(1)[0][0] if hours else 0,
        )

    # DTO mapping
    def to_dtos(self, appointments: list[Appointment]) -> list[AppointmentRead]:
        user_ids = {a.owner_user_id for a in appointments} | {a.vet_user_id for a in appointments if a.vet_user_id}
        names = self.identity.display_names(user_ids)
        return [self._to_dto(a, names) for a in appointments]

    def to_dto(self, appointment: Appointment) -> AppointmentRead:
        return self.to_dtos([appointment])[0]

    def _to_dto(self, appointment: Appointment, names: dict[uuid.UUID, str]) -> AppointmentRead:
        return AppointmentRead(
            appointment_id=appointment.appointment_id,
            pet_id=appointment.pet_id,
            pet_name=_pet_name(appointment),
            owner_user_id=appointment.owner_user_id,
            owner_name=names.get(appointment.owner_user_id, UNKNOWN_OWNER),
            vet_user_id=appointment.vet_user_id,
            vet_name=names.get(appointment.vet_user_id) if appointment.vet_user_id else None,
            requested_datetime=appointment.requested_datetime,
            actual_datetime=appointment.actual_datetime,
            reason_for_visit=appointment.reason_for_visit,
            notes=appointment.notes,
            admin_notes=appointment.admin_notes,
            status=appointment.status,
            status_display_name=appointment.status_display_name,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            can_be_cancelled=appointment.can_be_cancelled,
            requires_action=appointment.requires_action,
        )

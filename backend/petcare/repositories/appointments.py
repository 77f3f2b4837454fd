"""Module: appointments repository.

Query contracts used by the appointment workflow and its dashboards. Methods
flush but never commit; the calling service owns the unit of work.
"""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petcare.core.timeutils import utcnow
from petcare.db.models.appointment import Appointment, AppointmentStatus


class AppointmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def get_by_id(self, appointment_id: uuid.UUID) -> Appointment | None:
        return self.db.execute(
            select(Appointment).where(Appointment.appointment_id == appointment_id)
        ).scalar_one_or_none()

    def update(self, appointment: Appointment) -> Appointment:
        appointment.updated_at = utcnow()
        self.db.flush()
        return appointment

    # Owner-specific queries, newest request first.
    def list_by_owner(self, owner_user_id: uuid.UUID, status: AppointmentStatus | None = None) -> list[Appointment]:
        stmt = select(Appointment).where(Appointment.owner_user_id == owner_user_id)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        return list(self.db.execute(stmt.order_by(Appointment.created_at.desc())).scalars().all())

    # Admin queries for the management interface.
    def list_all(self) -> list[Appointment]:
        return list(self.db.execute(select(Appointment).order_by(Appointment.created_at.desc())).scalars().all())

    def list_by_status(self, status: AppointmentStatus) -> list[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.status == status)
            .order_by(Appointment.requested_datetime.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_pending(self) -> list[Appointment]:
        return self.list_by_status(AppointmentStatus.PENDING)

    # Vet-specific queries, soonest first.
    def list_by_vet(self, vet_user_id: uuid.UUID, status: AppointmentStatus | None = None) -> list[Appointment]:
        stmt = select(Appointment).where(Appointment.vet_user_id == vet_user_id)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        return list(self.db.execute(stmt.order_by(Appointment.requested_datetime.asc())).scalars().all())

    def list_requested_between(self, start: datetime, end: datetime) -> list[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.requested_datetime >= start, Appointment.requested_datetime < end)
            .order_by(Appointment.requested_datetime.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def has_conflict(
        self,
        requested_datetime: datetime,
        vet_user_id: uuid.UUID,
        window_minutes: int,
        exclude_appointment_id: uuid.UUID | None = None,
    ) -> bool:
        """True when the vet already holds a non-cancelled slot within the window."""
        window = timedelta(minutes=window_minutes)
        scheduled = func.coalesce(Appointment.actual_datetime, Appointment.requested_datetime)
        stmt = select(Appointment.appointment_id).where(
            Appointment.vet_user_id == vet_user_id,
            Appointment.status != AppointmentStatus.CANCELLED,
            scheduled >= requested_datetime - window,
            scheduled <= requested_datetime + window,
        )
        if exclude_appointment_id is not None:
            stmt = stmt.where(Appointment.appointment_id != exclude_appointment_id)
        return self.db.execute(stmt.limit(1)).first() is not None

    # Dashboard statistics.
    def count_by_status(self, status: AppointmentStatus) -> int:
        return self.db.execute(
            select(func.count(Appointment.appointment_id)).where(Appointment.status == status)
        ).scalar_one()

    def counts_by_status(self) -> dict[AppointmentStatus, int]:
        rows = self.db.execute(
            select(Appointment.status, func.count(Appointment.appointment_id)).group_by(Appointment.status)
        ).all()
        counts = {status: 0 for status in AppointmentStatus}
        for status, total in rows:
            counts[status] = int(total)
        return counts

    def count_requested_on(self, day_start: datetime) -> int:
        day_end = day_start + timedelta(days=1)
        return self.db.execute(
            select(func.count(Appointment.appointment_id)).where(
                Appointment.requested_datetime >= day_start,
                Appointment.requested_datetime < day_end,
            )
        ).scalar_one()

"""Module: appointment."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petcare.core.timeutils import utcnow
from petcare.db.base import Base
from petcare.db.models.pet import Pet


class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"
    NO_SHOW = "NoShow"

    # Accept "approved", "APPROVED", "no-show" from API clients.
    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.replace("-", "").replace("_", "").lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None


# Allowed transitions; statuses absent from the keys are terminal.
ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.APPROVED: frozenset(
        {AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED, AppointmentStatus.NO_SHOW}
    ),
}


# Owner-requested visit moving through the approval workflow. Never deleted.
class Appointment(Base):
    __tablename__ = "appointments"

    appointment_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pets.pet_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Assigned by an admin on approval only.
    vet_user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    requested_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    actual_datetime: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    reason_for_visit: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus, native_enum=False, length=16),
        nullable=False,
        default=AppointmentStatus.PENDING,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_by_user_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)

    pet: Mapped[Pet] = relationship(lazy="joined")

    @property
    def status_display_name(self) -> str:
        return self.status.value

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in (AppointmentStatus.PENDING, AppointmentStatus.APPROVED)

    @property
    def requires_action(self) -> bool:
        return self.status == AppointmentStatus.PENDING

    @property
    def scheduled_datetime(self) -> datetime:
        return self.actual_datetime or self.requested_datetime

    def can_transition_to(self, target: AppointmentStatus) -> bool:
        return target in ALLOWED_TRANSITIONS.get(self.status, frozenset())

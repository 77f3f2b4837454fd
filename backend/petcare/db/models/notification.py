"""Module: notification."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petcare.core.timeutils import utcnow
from petcare.db.base import Base


class NotificationType(str, enum.Enum):
    GENERAL = "General"
    APPOINTMENT_APPROVED = "AppointmentApproved"
    APPOINTMENT_CANCELLED = "AppointmentCancelled"
    APPOINTMENT_ASSIGNED = "AppointmentAssigned"
    APPOINTMENT_REMINDER = "AppointmentReminder"
    SYSTEM_MESSAGE = "SystemMessage"

    @property
    def display_name(self) -> str:
        return NOTIFICATION_DISPLAY_NAMES[self]


NOTIFICATION_DISPLAY_NAMES = {
    NotificationType.GENERAL: "General",
    NotificationType.APPOINTMENT_APPROVED: "Appointment Approved",
    NotificationType.APPOINTMENT_CANCELLED: "Appointment Cancelled",
    NotificationType.APPOINTMENT_ASSIGNED: "Vet Assigned",
    NotificationType.APPOINTMENT_REMINDER: "Appointment Reminder",
    NotificationType.SYSTEM_MESSAGE: "System Message",
}


# User-addressed in-app message created as a side effect of workflow events.
class Notification(Base):
    __tablename__ = "notifications"

    notification_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, native_enum=False, length=32),
        nullable=False,
        default=NotificationType.GENERAL,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Serialized typed payload; see petcare.schemas.notifications.
    data: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
    )

    def mark_as_read(self, now: datetime) -> bool:
        """Flip to read once; returns False when it was already read."""
        if self.is_read:
            return False
        self.is_read = True
        self.read_at = now
        return True

"""Module: notifications.

Builds and persists user-addressed notifications for workflow events, and
serves the caller-scoped inbox operations. Dispatch means inserting one row
the recipient sees on their next poll; there is no external transport.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from petcare.core.config import Settings
from petcare.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from petcare.core.timeutils import format_appointment_time, utcnow
from petcare.db.models.appointment import Appointment
from petcare.db.models.notification import Notification, NotificationType
from petcare.repositories.notifications import NotificationRepository
from petcare.repositories.users import UserRepository
from petcare.schemas.notifications import (
    AppointmentApprovedData,
    AppointmentAssignedData,
    AppointmentCancelledData,
    GeneralData,
    NotificationPayload,
    NotificationRead,
    encode_payload,
)

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "No reason provided"


class NotificationService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.notifications = NotificationRepository(db)

    def create_notification(
        self,
        user_id: uuid.UUID,
        notification_type: NotificationType,
        title: str,
        message: str,
        payload: NotificationPayload | None = None,
    ) -> Notification:
        notification = self.notifications.create(
            Notification(
                user_id=user_id,
                type=notification_type,
                title=title,
                message=message,
                data=encode_payload(notification_type, payload),
                is_read=False,
                created_at=utcnow(),
            )
        )
        self.db.commit()
        logger.info(
            "Notification %s (%s) dispatched to user %s",
            notification.notification_id,
            notification_type.value,
            user_id,
        )
        return notification

    # Workflow events
    def notify_appointment_approved(
        self, appointment: Appointment, pet_name: str, vet_name: str | None = None
    ) -> Notification:
        when = format_appointment_time(appointment.requested_datetime)
        message = f"Your appointment request for {pet_name} on {when} has been approved."
        if vet_name:
            message += f" Assigned veterinarian: {vet_name}"

        payload = AppointmentApprovedData(
            appointment_id=appointment.appointment_id,
            pet_id=appointment.pet_id,
            pet_name=pet_name,
            requested_datetime=appointment.requested_datetime,
            vet_user_id=appointment.vet_user_id,
            vet_name=vet_name,
        )
        return self.create_notification(
            appointment.owner_user_id,
            NotificationType.APPOINTMENT_APPROVED,
            "Appointment Approved",
            message,
            payload,
        )

    def notify_appointment_cancelled(
        self, appointment: Appointment, pet_name: str, reason: str | None = None
    ) -> Notification:
        reason = (reason or "").strip() or DEFAULT_CANCEL_REASON
        when = format_appointment_time(appointment.requested_datetime)
        message = f"Your appointment request for {pet_name} on {when} has been cancelled. Reason: {reason}"

        payload = AppointmentCancelledData(
            appointment_id=appointment.appointment_id,
            pet_id=appointment.pet_id,
            pet_name=pet_name,
            requested_datetime=appointment.requested_datetime,
            reason=reason,
        )
        return self.create_notification(
            appointment.owner_user_id,
            NotificationType.APPOINTMENT_CANCELLED,
            "Appointment Cancelled",
            message,
            payload,
        )

    def notify_vet_assigned(self, appointment: Appointment, pet_name: str, owner_name: str) -> Notification:
        if appointment.vet_user_id is None:
            raise ValueError("appointment has no assigned vet")
        when = format_appointment_time(appointment.requested_datetime)
        message = f"You have been assigned to an appointment for {pet_name} on {when}."

        payload = AppointmentAssignedData(
            appointment_id=appointment.appointment_id,
            pet_id=appointment.pet_id,
            pet_name=pet_name,
            requested_datetime=appointment.requested_datetime,
            owner_name=owner_name,
            reason_for_visit=appointment.reason_for_visit,
        )
        return self.create_notification(
            appointment.vet_user_id,
            NotificationType.APPOINTMENT_ASSIGNED,
            "New Appointment Assigned",
            message,
            payload,
        )

    def send_general(
        self, user_id: uuid.UUID, title: str, message: str, data: dict[str, Any] | None = None
    ) -> Notification:
        if UserRepository(self.db).get_by_id(user_id) is None:
            raise NotFoundError("User not found", details={"userId": str(user_id)})
        payload = GeneralData(**data) if data else None
        return self.create_notification(user_id, NotificationType.GENERAL, title, message, payload)

    # Inbox
    def list_mine(self, user_id: uuid.UUID) -> list[Notification]:
        return self.notifications.list_by_user(user_id, self.settings.notification_page_size)

    def list_unread(self, user_id: uuid.UUID) -> list[Notification]:
        return self.notifications.list_unread_by_user(user_id)

    def unread_count(self, user_id: uuid.UUID) -> int:
        return self.notifications.count_unread(user_id)

    def get_for_user(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification:
        notification = self.notifications.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found", details={"notificationId": str(notification_id)})
        if notification.user_id != user_id:
            raise ForbiddenError("This notification belongs to another user")
        return notification

    def mark_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification:
        notification = self.get_for_user(notification_id, user_id)
        if notification.mark_as_read(utcnow()):
            self.db.commit()
        return notification

    def mark_all_read(self, user_id: uuid.UUID) -> int:
        updated = self.notifications.mark_all_read(user_id, utcnow())
        self.db.commit()
        return updated

    def cleanup(self, older_than_days: int) -> int:
        if older_than_days < 1:
            raise ValidationFailedError.for_field("olderThanDays", "Must be at least 1 day")
        cutoff = utcnow() - timedelta(days=older_than_days)
        deleted = self.notifications.delete_older_than(cutoff)
        self.db.commit()
        logger.info("Deleted %d notifications older than %d days", deleted, older_than_days)
        return deleted

    def to_dto(self, notification: Notification) -> NotificationRead:
        recent_cutoff = utcnow() - timedelta(days=self.settings.notification_recent_days)
        return NotificationRead(
            notification_id=notification.notification_id,
            user_id=notification.user_id,
            type=notification.type,
            type_display_name=notification.type.display_name,
            title=notification.title,
            message=notification.message,
            data=notification.data,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
            is_recent=notification.created_at >= recent_cutoff,
        )

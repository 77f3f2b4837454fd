"""Module: notification schemas.

Notification payloads are a tagged union keyed by ``NotificationType``. The
tag lives on the notification row itself, so the stored and exposed ``data``
string keeps the flat camelCase object shape API clients already read.
"""

import uuid
from datetime import datetime
from typing import Any, Union

from pydantic import ConfigDict, Field

from petcare.db.models.notification import NotificationType
from petcare.schemas.base import CamelModel, NonBlankStr


class AppointmentPayload(CamelModel):
    appointment_id: uuid.UUID
    pet_id: uuid.UUID
    pet_name: str
    requested_datetime: datetime = Field(alias="requestedDateTime")


class AppointmentApprovedData(AppointmentPayload):
    vet_user_id: uuid.UUID | None = None
    vet_name: str | None = None


class AppointmentCancelledData(AppointmentPayload):
    reason: str


class AppointmentAssignedData(AppointmentPayload):
    owner_name: str
    reason_for_visit: str


class GeneralData(CamelModel):
    model_config = ConfigDict(extra="allow")


NotificationPayload = Union[
    AppointmentApprovedData,
    AppointmentCancelledData,
    AppointmentAssignedData,
    GeneralData,
]

PAYLOAD_TYPES: dict[NotificationType, type[CamelModel]] = {
    NotificationType.APPOINTMENT_APPROVED: AppointmentApprovedData,
    NotificationType.APPOINTMENT_CANCELLED: AppointmentCancelledData,
    NotificationType.APPOINTMENT_ASSIGNED: AppointmentAssignedData,
}


def payload_type_for(notification_type: NotificationType) -> type[CamelModel]:
    return PAYLOAD_TYPES.get(notification_type, GeneralData)


def encode_payload(notification_type: NotificationType, payload: NotificationPayload | None) -> str | None:
    if payload is None:
        return None
    expected = payload_type_for(notification_type)
    if not isinstance(payload, expected):
        raise TypeError(f"{type(payload).__name__} is not a payload for {notification_type.value}")
    return payload.model_dump_json(by_alias=True)


def parse_payload(notification_type: NotificationType, data: str | None) -> NotificationPayload | None:
    if not data:
        return None
    return payload_type_for(notification_type).model_validate_json(data)


class NotificationCreate(CamelModel):
    user_id: uuid.UUID
    title: NonBlankStr = Field(max_length=200)
    message: NonBlankStr
    data: dict[str, Any] | None = None


class NotificationRead(CamelModel):
    notification_id: uuid.UUID = Field(alias="id")
    user_id: uuid.UUID
    type: NotificationType
    type_display_name: str
    title: str
    message: str
    data: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
    is_recent: bool


class UnreadCount(CamelModel):
    unread_count: int


class CleanupResult(CamelModel):
    deleted_count: int
    older_than_days: int

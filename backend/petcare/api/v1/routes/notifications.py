"""Module: notifications."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_current_user, get_db, get_settings_dep, require_roles
from petcare.core.config import Settings
from petcare.db.models.user import UserRole
from petcare.schemas.notifications import CleanupResult, NotificationCreate, NotificationRead, UnreadCount
from petcare.services.identity import Principal
from petcare.services.notifications import NotificationService

router = APIRouter()


def get_notification_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> NotificationService:
    return NotificationService(db, settings)


@router.get("/my", response_model=list[NotificationRead], summary="List my notifications")
def list_my_notifications(
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return [service.to_dto(n) for n in service.list_mine(caller.user_id)]


@router.get("/unread", response_model=list[NotificationRead], summary="List unread notifications")
def list_unread(
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return [service.to_dto(n) for n in service.list_unread(caller.user_id)]


@router.get("/unread-count", response_model=UnreadCount, summary="Unread notification count")
def unread_count(
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCount(unread_count=service.unread_count(caller.user_id))


@router.put("/mark-all-read", summary="Mark all notifications read")
def mark_all_read(
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return {"updatedCount": service.mark_all_read(caller.user_id)}


# Endpoint: admin bulk delete by age.
@router.delete("/cleanup", response_model=CleanupResult, summary="Delete old notifications")
def cleanup(
    older_than_days: int | None = Query(default=None, alias="olderThanDays"),
    _: Principal = Depends(require_roles(UserRole.ADMIN)),
    service: NotificationService = Depends(get_notification_service),
    settings: Settings = Depends(get_settings_dep),
):
    days = older_than_days if older_than_days is not None else settings.notification_retention_days
    return CleanupResult(deleted_count=service.cleanup(days), older_than_days=days)


# Endpoint: admin-authored general message to one user.
@router.post(
    "",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification to a user",
)
def send_notification(
    payload: NotificationCreate,
    _: Principal = Depends(require_roles(UserRole.ADMIN)),
    service: NotificationService = Depends(get_notification_service),
):
    notification = service.send_general(payload.user_id, payload.title, payload.message, payload.data)
    return service.to_dto(notification)


@router.get("/{notification_id}", response_model=NotificationRead, summary="Get notification")
def get_notification(
    notification_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return service.to_dto(service.get_for_user(notification_id, caller.user_id))


@router.put("/{notification_id}/read", response_model=NotificationRead, summary="Mark notification read")
def mark_read(
    notification_id: uuid.UUID,
    caller: Principal = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return service.to_dto(service.mark_read(notification_id, caller.user_id))

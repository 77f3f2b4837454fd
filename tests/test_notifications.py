"""
Tests for notification dispatch and the caller-scoped inbox.
"""

import json
import uuid
from datetime import datetime, timedelta

import pytest

from petcare.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from petcare.core.timeutils import utcnow
from petcare.db.models import Notification, NotificationType
from petcare.schemas.notifications import (
    AppointmentApprovedData,
    AppointmentCancelledData,
    GeneralData,
    encode_payload,
    parse_payload,
)
from petcare.services.identity import principal_for
from petcare.services.notifications import NotificationService


@pytest.fixture
def notification_service(db, settings) -> NotificationService:
    return NotificationService(db, settings)


class TestPayloads:
    """Test the typed payload union and its JSON wire shape."""

    def test_approved_payload_is_flat_camel_case(self):
        payload = AppointmentApprovedData(
            appointment_id=uuid.uuid4(),
            pet_id=uuid.uuid4(),
            pet_name="Biscuit",
            requested_datetime=datetime(2026, 10, 20, 9, 30),
            vet_user_id=None,
            vet_name=None,
        )
        data = json.loads(encode_payload(NotificationType.APPOINTMENT_APPROVED, payload))

        assert set(data) == {"appointmentId", "petId", "petName", "requestedDateTime", "vetUserId", "vetName"}
        assert data["petName"] == "Biscuit"

    def test_payload_must_match_notification_type(self):
        payload = GeneralData(note="hello")
        with pytest.raises(TypeError):
            encode_payload(NotificationType.APPOINTMENT_CANCELLED, payload)

    def test_parse_selects_variant_by_type(self):
        raw = json.dumps(
            {
                "appointmentId": str(uuid.uuid4()),
                "petId": str(uuid.uuid4()),
                "petName": "Biscuit",
                "requestedDateTime": "2026-10-20T09:30:00",
                "reason": "Clinic closed",
            }
        )
        parsed = parse_payload(NotificationType.APPOINTMENT_CANCELLED, raw)

        assert isinstance(parsed, AppointmentCancelledData)
        assert parsed.reason == "Clinic closed"

    def test_general_payload_keeps_free_form_fields(self):
        raw = encode_payload(NotificationType.GENERAL, GeneralData(link="/pets", priority=2))
        parsed = parse_payload(NotificationType.GENERAL, raw)
        assert parsed.model_dump() == {"link": "/pets", "priority": 2}

    def test_empty_payload(self):
        assert encode_payload(NotificationType.GENERAL, None) is None
        assert parse_payload(NotificationType.GENERAL, None) is None


class TestDispatch:
    """Test notification text built from workflow events."""

    def test_approved_message(self, db, notification_service, request_appointment, owner):
        appointment = request_appointment(days_ahead=3, hour=9, minute=30)

        notification = notification_service.notify_appointment_approved(appointment, "Biscuit", "Dr. Vera Vet")

        when = appointment.requested_datetime
        hour = when.hour % 12 or 12
        expected_when = f"{when:%b %d, %Y} at {hour}:{when:%M} AM"
        assert notification.user_id == owner.user_id
        assert notification.title == "Appointment Approved"
        assert notification.message == (
            f"Your appointment request for Biscuit on {expected_when} has been approved."
            " Assigned veterinarian: Dr. Vera Vet"
        )
        data = json.loads(notification.data)
        assert data["appointmentId"] == str(appointment.appointment_id)
        assert data["vetName"] == "Dr. Vera Vet"

    def test_cancelled_message_defaults_reason(self, notification_service, request_appointment):
        appointment = request_appointment()

        notification = notification_service.notify_appointment_cancelled(appointment, "Biscuit", None)

        assert notification.title == "Appointment Cancelled"
        assert notification.message.endswith("has been cancelled. Reason: No reason provided")
        assert json.loads(notification.data)["reason"] == "No reason provided"

    def test_vet_assignment_requires_a_vet(self, notification_service, request_appointment):
        appointment = request_appointment()
        with pytest.raises(ValueError):
            notification_service.notify_vet_assigned(appointment, "Biscuit", "Olive Owner")

    def test_send_general_to_unknown_user(self, notification_service):
        with pytest.raises(NotFoundError):
            notification_service.send_general(uuid.uuid4(), "Hello", "World")


class TestInbox:
    """Test read-state operations scoped to the recipient."""

    def test_mark_read_is_idempotent(self, db, notification_service, owner):
        notification = notification_service.send_general(owner.user_id, "Hello", "First message")

        first = notification_service.mark_read(notification.notification_id, owner.user_id)
        read_at = first.read_at
        second = notification_service.mark_read(notification.notification_id, owner.user_id)

        assert second.is_read is True
        assert read_at is not None
        assert second.read_at == read_at

    def test_cannot_read_someone_elses(self, notification_service, owner, other_owner):
        notification = notification_service.send_general(owner.user_id, "Hello", "Private")
        with pytest.raises(ForbiddenError):
            notification_service.mark_read(notification.notification_id, other_owner.user_id)

    def test_unread_count_and_mark_all(self, db, notification_service, owner, other_owner):
        for n in range(3):
            notification_service.send_general(owner.user_id, f"Note {n}", "Body")
        notification_service.send_general(other_owner.user_id, "Other", "Body")

        assert notification_service.unread_count(owner.user_id) == 3
        assert notification_service.mark_all_read(owner.user_id) == 3
        db.expire_all()
        assert notification_service.unread_count(owner.user_id) == 0
        assert notification_service.unread_count(other_owner.user_id) == 1
        assert notification_service.list_unread(owner.user_id) == []

    def test_mark_all_keeps_existing_read_at(self, db, notification_service, owner):
        first = notification_service.send_general(owner.user_id, "A", "Body")
        notification_service.send_general(owner.user_id, "B", "Body")
        read_at = notification_service.mark_read(first.notification_id, owner.user_id).read_at

        notification_service.mark_all_read(owner.user_id)
        db.expire_all()

        assert db.get(Notification, first.notification_id).read_at == read_at

    def test_list_mine_is_capped_and_newest_first(self, db, settings, owner):
        capped = settings.model_copy(update={"notification_page_size": 2})
        service = NotificationService(db, capped)
        base = utcnow() - timedelta(hours=1)
        for minutes in range(3):
            db.add(Notification(
                user_id=owner.user_id,
                type=NotificationType.GENERAL,
                title=f"T{minutes}",
                message="Body",
                created_at=base + timedelta(minutes=minutes),
            ))
        db.commit()

        listed = service.list_mine(owner.user_id)
        assert [n.title for n in listed] == ["T2", "T1"]

    def test_dto_flags_recent_and_display_name(self, db, notification_service, owner):
        old = Notification(
            user_id=owner.user_id,
            type=NotificationType.APPOINTMENT_ASSIGNED,
            title="Old",
            message="Body",
            created_at=utcnow() - timedelta(days=10),
        )
        db.add(old)
        db.commit()
        fresh = notification_service.send_general(owner.user_id, "New", "Body")

        assert notification_service.to_dto(fresh).is_recent is True
        old_dto = notification_service.to_dto(old)
        assert old_dto.is_recent is False
        assert old_dto.type_display_name == "Vet Assigned"

    def test_cleanup_deletes_by_age(self, db, notification_service, owner):
        db.add(Notification(
            user_id=owner.user_id,
            type=NotificationType.GENERAL,
            title="Ancient",
            message="Body",
            created_at=utcnow() - timedelta(days=120),
        ))
        db.commit()
        notification_service.send_general(owner.user_id, "Fresh", "Body")

        assert notification_service.cleanup(90) == 1
        db.expire_all()
        assert [n.title for n in notification_service.list_mine(owner.user_id)] == ["Fresh"]

    def test_cleanup_rejects_non_positive_age(self, notification_service):
        with pytest.raises(ValidationFailedError):
            notification_service.cleanup(0)


class TestNotificationApi:
    """Test the HTTP surface of the inbox."""

    def test_unread_count_shape(self, client, auth_headers, notification_service, owner):
        notification_service.send_general(owner.user_id, "Hello", "Body")

        response = client.get("/api/v1/notifications/unread-count", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json() == {"unreadCount": 1}

    def test_read_flow(self, client, auth_headers, notification_service, owner):
        notification = notification_service.send_general(owner.user_id, "Hello", "Body", {"link": "/pets"})
        url = f"/api/v1/notifications/{notification.notification_id}/read"

        first = client.put(url, headers=auth_headers(owner))
        second = client.put(url, headers=auth_headers(owner))

        assert first.status_code == 200
        body = first.json()
        assert body["isRead"] is True
        assert body["typeDisplayName"] == "General"
        assert json.loads(body["data"]) == {"link": "/pets"}
        assert second.json()["readAt"] == body["readAt"]

    def test_other_users_notification_is_forbidden(self, client, auth_headers, notification_service, owner, other_owner):
        notification = notification_service.send_general(owner.user_id, "Hello", "Body")

        response = client.get(f"/api/v1/notifications/{notification.notification_id}", headers=auth_headers(other_owner))

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    def test_cleanup_is_admin_only(self, client, auth_headers, owner, admin):
        denied = client.delete("/api/v1/notifications/cleanup", headers=auth_headers(owner))
        allowed = client.delete("/api/v1/notifications/cleanup?olderThanDays=30", headers=auth_headers(admin))

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json() == {"deletedCount": 0, "olderThanDays": 30}

    def test_admin_sends_general_notification(self, client, auth_headers, admin, owner):
        response = client.post(
            "/api/v1/notifications",
            json={"userId": str(owner.user_id), "title": "Clinic news", "message": "New opening hours"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        assert response.json()["userId"] == str(owner.user_id)
        mine = client.get("/api/v1/notifications/my", headers=auth_headers(owner)).json()
        assert [n["title"] for n in mine] == ["Clinic news"]

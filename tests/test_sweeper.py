"""Tests for the scheduled, outbox and retention jobs."""

from __future__ import annotations

from datetime import timedelta

import pytest

from lokal.application.use_cases.notifications import (
    NotificationService,
    cleanup_old_notifications,
    process_email_outbox,
    process_scheduled_notifications,
)
from lokal.config import Settings
from lokal.domain.entities import (
    EmailTaskStatus,
    Notification,
    NotificationData,
    NotificationType,
)
from lokal.infrastructure.repositories import EmailOutboxRepository
from lokal.utils import now_in_app_timezone


def _store(service, user_id="u1", **fields):
    """Insert a row directly, bypassing creation-time email."""

    created_at = fields.pop("created_at", None)
    notification = Notification.from_data(
        NotificationData(
            user_id=user_id,
            type=fields.pop("type", NotificationType.ACTIVITY_REMINDER_1H),
            title="Etkinlik Yakında",
            message="Kahve Tadımı etkinliği 1 saat içinde başlayacak!",
            **fields,
        )
    )
    notification.created_at = created_at
    return service.notifications.create(notification)


def test_cleanup_removes_only_rows_past_retention(notification_service) -> None:
    now = now_in_app_timezone()
    old = _store(notification_service, created_at=now - timedelta(days=31))
    recent = _store(notification_service, created_at=now - timedelta(days=29))

    result = cleanup_old_notifications(notification_service, now=now)

    assert result.ok and result.value == 1
    assert notification_service.notifications.get(old.id) is None
    assert notification_service.notifications.get(recent.id) is not None


def test_cleanup_honours_custom_retention(notification_service) -> None:
    now = now_in_app_timezone()
    _store(notification_service, created_at=now - timedelta(days=8))

    assert cleanup_old_notifications(notification_service, now=now, retention_days=7).value == 1


def test_due_scheduled_notifications_are_released_and_emailed(
    notification_service, make_user, email_client
) -> None:
    make_user("u1")
    now = now_in_app_timezone()
    due = _store(notification_service, scheduled_for=now - timedelta(minutes=1))
    later = _store(notification_service, scheduled_for=now + timedelta(hours=2))
    immediate = _store(notification_service)

    result = process_scheduled_notifications(notification_service, now=now)

    assert result.ok and result.value == 1
    released = notification_service.notifications.get(due.id)
    assert released.scheduled_for is None
    assert released.is_email_sent is True
    assert len(email_client.calls) == 1
    assert notification_service.notifications.get(later.id).scheduled_for is not None
    assert notification_service.notifications.get(immediate.id).is_email_sent is False


def test_released_notification_respects_preferences(
    notification_service, make_user, email_client
) -> None:
    make_user("u1", preferences={"activity_reminders_1h": False})
    now = now_in_app_timezone()
    due = _store(notification_service, scheduled_for=now - timedelta(minutes=5))

    assert process_scheduled_notifications(notification_service, now=now).value == 1
    assert email_client.calls == []
    assert notification_service.notifications.get(due.id).scheduled_for is None


@pytest.fixture()
def retry_service(db_session, email_client) -> NotificationService:
    settings = Settings(
        email_outbox_max_attempts=3,
        email_outbox_backoff_seconds=60,
        email_outbox_max_backoff_seconds=600,
    )
    return NotificationService(db_session, email_client=email_client, settings=settings)


def _only_task(db_session, notification_id):
    (task,) = EmailOutboxRepository(db_session).list_for_notification(notification_id)
    return task


def test_outbox_retries_with_backoff_until_delivered(
    retry_service, make_user, email_client, db_session
) -> None:
    make_user("u1")
    email_client.delivered = False
    notification = retry_service.create_notification(
        NotificationData(
            user_id="u1",
            type=NotificationType.ACTIVITY_UPDATE,
            title="Etkinlik Güncellendi",
            message="m",
        )
    ).value
    first = _only_task(db_session, notification.id)
    assert first.attempts == 1

    too_early = first.next_attempt_at - timedelta(seconds=1)
    assert process_email_outbox(retry_service, now=too_early).value == 0
    assert _only_task(db_session, notification.id).attempts == 1

    second_try_at = first.next_attempt_at
    assert process_email_outbox(retry_service, now=second_try_at).value == 0
    second = _only_task(db_session, notification.id)
    assert second.attempts == 2
    assert second.next_attempt_at == second_try_at + timedelta(seconds=120)

    email_client.delivered = True
    assert process_email_outbox(retry_service, now=second.next_attempt_at).value == 1
    final = _only_task(db_session, notification.id)
    assert final.status is EmailTaskStatus.SENT
    assert final.attempts == 3
    assert retry_service.notifications.get(notification.id).is_email_sent is True
    assert len(email_client.calls) == 3


def test_outbox_gives_up_after_max_attempts(
    retry_service, make_user, email_client, db_session
) -> None:
    make_user("u1")
    email_client.delivered = False
    notification = retry_service.create_notification(
        NotificationData(
            user_id="u1", type=NotificationType.NEW_ACTIVITY, title="Yeni Etkinlik", message="m"
        )
    ).value
    far_future = now_in_app_timezone() + timedelta(days=1)

    process_email_outbox(retry_service, now=far_future)
    process_email_outbox(retry_service, now=far_future + timedelta(hours=1))
    process_email_outbox(retry_service, now=far_future + timedelta(hours=2))

    task = _only_task(db_session, notification.id)
    assert task.status is EmailTaskStatus.FAILED
    assert task.attempts == 3
    assert task.last_error == "sink down"
    assert len(email_client.calls) == 3


def test_missing_email_address_fails_permanently(
    notification_service, make_user, email_client, db_session
) -> None:
    make_user("u1", without_email=True)

    notification = notification_service.create_notification(
        NotificationData(
            user_id="u1", type=NotificationType.ACTIVITY_UPDATE, title="t", message="m"
        )
    ).value

    task = _only_task(db_session, notification.id)
    assert task.status is EmailTaskStatus.FAILED
    assert email_client.calls == []


def test_queued_email_waits_when_inline_dispatch_is_off(
    db_session, make_user, email_client
) -> None:
    make_user("u1")
    service = NotificationService(
        db_session, email_client=email_client, settings=Settings(email_dispatch_inline=False)
    )
    notification = service.create_notification(
        NotificationData(
            user_id="u1", type=NotificationType.ACTIVITY_UPDATE, title="t", message="m"
        )
    ).value
    assert email_client.calls == []

    assert process_email_outbox(service).value == 1
    assert service.notifications.get(notification.id).is_email_sent is True

"""Tests for turning domain events into notifications."""

from __future__ import annotations

import pytest

from lokal.application.use_cases.notifications import (
    UPDATE_TYPE_CANCELLED,
    UPDATE_TYPE_UPDATE,
    NotificationFanout,
)
from lokal.domain.entities import NotificationCategory, NotificationType, RelatedType
from lokal.domain.results import ErrorKind
from lokal.infrastructure.models import NotificationModel


@pytest.fixture()
def fanout(notification_service) -> NotificationFanout:
    return NotificationFanout(notification_service)


def _all_rows(service, user_id):
    return service.list_notifications(user_id, limit=100).value.notifications


def test_cancellation_reaches_every_attendee(
    fanout, notification_service, make_user, make_activity, email_client
) -> None:
    """Three attendees each get exactly one cancellation mentioning the reason."""

    for user_id in ("u1", "u2", "u3"):
        make_user(user_id)
    activity = make_activity(attendees=("u1", "u2", "u3"))

    result = fanout.notify_activity_update(activity.id, UPDATE_TYPE_CANCELLED, "rain")

    assert result.ok and result.value == 3
    for user_id in ("u1", "u2", "u3"):
        (row,) = _all_rows(notification_service, user_id)
        assert row.type is NotificationType.ACTIVITY_CANCELLED
        assert row.category is NotificationCategory.ACTIVITY
        assert row.title == "Etkinlik İptal Edildi"
        assert row.message == "Kahve Tadımı etkinliği iptal edilmiştir. Sebep: rain"
        assert row.related_id == activity.id
        assert row.related_type is RelatedType.ACTIVITY
        assert row.action_url == f"/activities/{activity.id}"
    assert email_client.calls == []


def test_update_without_reason_uses_update_copy(
    fanout, notification_service, make_activity
) -> None:
    activity = make_activity(attendees=("u1",))

    result = fanout.notify_activity_update(activity.id, UPDATE_TYPE_UPDATE)

    assert result.value == 1
    (row,) = _all_rows(notification_service, "u1")
    assert row.type is NotificationType.ACTIVITY_UPDATE
    assert row.message == "Kahve Tadımı etkinliğinde güncelleme yapıldı."


@pytest.mark.parametrize(
    ("hours", "expected_type", "expected_title", "expected_message"),
    [
        (
            24,
            NotificationType.ACTIVITY_REMINDER_24H,
            "Etkinlik Hatırlatması",
            "Kahve Tadımı etkinliği yarın başlayacak!",
        ),
        (
            1,
            NotificationType.ACTIVITY_REMINDER_1H,
            "Etkinlik Yakında",
            "Kahve Tadımı etkinliği 1 saat içinde başlayacak!",
        ),
    ],
)
def test_reminders_use_lead_time_copy(
    fanout,
    notification_service,
    make_activity,
    hours,
    expected_type,
    expected_title,
    expected_message,
) -> None:
    activity = make_activity(attendees=("u1", "u2"))

    result = fanout.send_activity_reminders(activity.id, hours)

    assert result.value == 2
    (row,) = _all_rows(notification_service, "u2")
    assert (row.type, row.title, row.message) == (
        expected_type,
        expected_title,
        expected_message,
    )


def test_empty_audiences_are_successful_no_ops(fanout, make_activity, db_session) -> None:
    activity = make_activity()

    results = [
        fanout.send_activity_reminders(activity.id, 24),
        fanout.notify_activity_update(activity.id, UPDATE_TYPE_CANCELLED, "rain"),
        fanout.notify_new_activity(activity.id),
    ]

    assert all(result.ok and result.value == 0 for result in results)
    assert db_session.query(NotificationModel).count() == 0


def test_new_activity_goes_to_subscribed_members_only(
    fanout, notification_service, make_user, make_activity
) -> None:
    make_user("fan")
    make_user("quiet", preferences={"new_activities": False})
    make_user("unknown", with_preferences=False)
    activity = make_activity(title="Latte Art")

    result = fanout.notify_new_activity(activity.id)

    assert result.value == 1
    (row,) = _all_rows(notification_service, "fan")
    assert row.type is NotificationType.NEW_ACTIVITY
    assert row.category is NotificationCategory.SYSTEM
    assert row.message == "Latte Art adlı yeni bir etkinlik eklendi!"
    assert _all_rows(notification_service, "quiet") == []
    assert _all_rows(notification_service, "unknown") == []


def test_missing_activity_is_a_not_found_failure(fanout, caplog) -> None:
    with caplog.at_level("ERROR"):
        result = fanout.notify_activity_update("missing", UPDATE_TYPE_UPDATE)

    assert not result.ok
    assert result.error_kind is ErrorKind.NOT_FOUND
    assert "Activity missing not found" in caplog.text


def test_new_follower_notifies_followee(
    fanout, notification_service, make_user, email_client
) -> None:
    make_user("ayse", full_name="Ayşe Yılmaz")
    make_user("mehmet")

    result = fanout.notify_new_follower("mehmet", "ayse")

    assert result.value == 1
    (row,) = _all_rows(notification_service, "mehmet")
    assert row.type is NotificationType.SOCIAL_INTERACTION
    assert row.title == "Yeni Takipçi"
    assert row.message == "Ayşe Yılmaz sizi takip etmeye başladı!"
    assert row.related_type is RelatedType.USER
    assert row.action_url == "/profile/ayse"
    assert [call["to"] for call in email_client.calls] == ["mehmet@example.com"]


def test_unknown_follower_creates_nothing(fanout, notification_service) -> None:
    result = fanout.notify_new_follower("mehmet", "ghost")

    assert result.error_kind is ErrorKind.NOT_FOUND
    assert _all_rows(notification_service, "mehmet") == []


def test_comment_notifies_activity_creator(
    fanout, notification_service, make_user, make_activity
) -> None:
    make_user("host")
    make_user("guest", full_name="Deniz")
    activity = make_activity(created_by="host")

    result = fanout.notify_new_comment(activity.id, "guest", "Harika olacak!")

    assert result.value == 1
    (row,) = _all_rows(notification_service, "host")
    assert row.title == "Yeni Yorum"
    assert row.message == 'Deniz "Kahve Tadımı" etkinliğinize yorum yaptı'
    assert row.action_url == f"/activities/{activity.id}#comments"


def test_commenting_on_own_activity_is_silent(
    fanout, notification_service, make_user, make_activity
) -> None:
    make_user("host")
    activity = make_activity(created_by="host")

    result = fanout.notify_new_comment(activity.id, "host", "text")

    assert result.ok and result.value == 0
    assert _all_rows(notification_service, "host") == []

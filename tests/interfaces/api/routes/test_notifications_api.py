"""Integration tests for the notification endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from lokal.domain.entities import NotificationData, NotificationType


def _seed(service, user_id: str, count: int) -> list[str]:
    service.create_bulk_notifications(
        [
            NotificationData(
                user_id=user_id,
                type=NotificationType.ACTIVITY_UPDATE,
                title=f"Bildirim {index}",
                message="m",
            )
            for index in range(count)
        ]
    )
    listing = service.list_notifications(user_id, limit=100).value
    return [notification.id for notification in listing.notifications]


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/notifications"),
        ("GET", "/notifications/unread-count"),
        ("PATCH", "/notifications"),
        ("DELETE", "/notifications"),
        ("GET", "/preferences"),
    ],
)
def test_endpoints_require_authentication(client, method, path) -> None:
    response = client.request(method, path, json={"notificationIds": ["x"]})

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_invalid_token_is_rejected(client, make_user) -> None:
    make_user("u1")

    response = client.get(
        "/notifications", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_pagination_contract(client, make_user, notification_service, auth_headers) -> None:
    """45 rows with limit 20: pages of 20, 20 and 5 with a stable total."""

    make_user("u1")
    _seed(notification_service, "u1", 45)
    headers = auth_headers("u1")

    first = client.get("/notifications?page=1&limit=20", headers=headers).json()
    third = client.get("/notifications?page=3&limit=20", headers=headers).json()

    assert first["success"] is True
    assert len(first["data"]["notifications"]) == 20
    assert first["data"]["pagination"] == {
        "page": 1,
        "limit": 20,
        "total": 45,
        "hasMore": True,
    }
    assert len(third["data"]["notifications"]) == 5
    assert third["data"]["pagination"]["hasMore"] is False
    assert third["data"]["pagination"]["total"] == 45

    row = first["data"]["notifications"][0]
    assert row["user_id"] == "u1"
    assert row["category"] == "activity"
    assert row["is_read"] is False


@pytest.mark.parametrize(
    "query",
    ["page=0", "limit=0", "limit=101", "filter=archived", "orderBy=title"],
)
def test_invalid_listing_parameters_return_400(client, make_user, auth_headers, query) -> None:
    make_user("u1")

    response = client.get(f"/notifications?{query}", headers=auth_headers("u1"))

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_mark_read_and_unread_count(client, make_user, notification_service, auth_headers) -> None:
    make_user("alice")
    make_user("bob")
    alice_ids = _seed(notification_service, "alice", 3)
    bob_ids = _seed(notification_service, "bob", 1)
    headers = auth_headers("alice")

    response = client.patch(
        "/notifications",
        json={"notificationIds": [alice_ids[0], alice_ids[1], bob_ids[0]], "action": "read"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"updatedCount": 2, "action": "read"}
    count = client.get("/notifications/unread-count", headers=headers).json()
    assert count == {"success": True, "data": {"count": 1}}
    assert notification_service.unread_count("bob").value == 1

    unread = client.patch(
        "/notifications",
        json={"notificationIds": [alice_ids[0]], "action": "unread"},
        headers=headers,
    )
    assert unread.json()["data"]["updatedCount"] == 1
    unread_listing = client.get("/notifications?filter=unread", headers=headers).json()
    assert unread_listing["data"]["pagination"]["total"] == 2


def test_delete_is_scoped_to_owner(client, make_user, notification_service, auth_headers) -> None:
    make_user("alice")
    make_user("bob")
    alice_ids = _seed(notification_service, "alice", 2)
    bob_ids = _seed(notification_service, "bob", 1)

    response = client.request(
        "DELETE",
        "/notifications",
        json={"notificationIds": [alice_ids[0], bob_ids[0]]},
        headers=auth_headers("alice"),
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"deletedCount": 1}
    assert notification_service.notifications.get(bob_ids[0]) is not None


def test_empty_id_list_is_rejected(client, make_user, auth_headers) -> None:
    make_user("u1")

    response = client.patch(
        "/notifications", json={"notificationIds": []}, headers=auth_headers("u1")
    )

    assert response.status_code == 400


def test_member_can_create_own_social_notification(
    client, make_user, auth_headers, email_client
) -> None:
    make_user("u1")

    response = client.post(
        "/notifications",
        json={
            "user_id": "u1",
            "type": "social_interaction",
            "title": "Yeni Takipçi",
            "message": "Deniz sizi takip etmeye başladı!",
        },
        headers=auth_headers("u1"),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["category"] == "social"
    assert data["is_email_sent"] is True
    assert len(email_client.calls) == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"user_id": "u2", "type": "social_interaction", "title": "t", "message": "m"},
        {"user_id": "u1", "type": "system", "title": "t", "message": "m"},
    ],
)
def test_member_cannot_create_foreign_or_system_notifications(
    client, make_user, auth_headers, payload
) -> None:
    make_user("u1")
    make_user("u2")

    response = client.post("/notifications", json=payload, headers=auth_headers("u1"))

    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Forbidden"}


def test_admin_can_create_system_notification_for_anyone(
    client, make_user, auth_headers
) -> None:
    make_user("admin", admin=True)
    make_user("u1")

    response = client.post(
        "/notifications",
        json={"user_id": "u1", "type": "system", "title": "Duyuru", "message": "m"},
        headers=auth_headers("admin"),
    )

    assert response.status_code == 201
    assert response.json()["data"]["category"] == "system"


def test_jobs_are_admin_only(client, make_user, auth_headers) -> None:
    make_user("admin", admin=True)
    make_user("u1")

    forbidden = client.post("/notifications/jobs/cleanup", headers=auth_headers("u1"))
    allowed = client.post("/notifications/jobs/cleanup", headers=auth_headers("admin"))

    assert forbidden.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["data"] == {"job": "cleanup", "processed": 0}


@pytest.mark.parametrize("job", ["scheduled", "outbox"])
def test_delivery_jobs_report_processed_rows(client, make_user, auth_headers, job) -> None:
    make_user("admin", admin=True)

    response = client.post(f"/notifications/jobs/{job}", headers=auth_headers("admin"))

    assert response.status_code == 200
    assert response.json()["data"]["job"] == job


def test_websocket_sends_unread_count_and_answers_ping(
    client, make_user, notification_service
) -> None:
    from lokal.infrastructure.security import create_access_token

    make_user("u1")
    _seed(notification_service, "u1", 2)

    with client.websocket_connect(f"/notifications/ws?token={create_access_token('u1')}") as ws:
        assert ws.receive_json() == {"type": "unread_count", "data": {"count": 2}}
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_preferences_default_and_update(client, make_user, auth_headers) -> None:
    make_user("u1", with_preferences=False)
    headers = auth_headers("u1")

    defaults = client.get("/preferences", headers=headers).json()["data"]
    assert defaults["email_notifications"] is True
    assert defaults["marketing_emails"] is False

    updated = client.put(
        "/preferences",
        json={"activity_reminders_24h": False, "preferred_reminder_time": "08:30"},
        headers=headers,
    )

    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["activity_reminders_24h"] is False
    assert data["activity_reminders_1h"] is True
    assert data["preferred_reminder_time"] == "08:30"
    assert client.get("/preferences", headers=headers).json()["data"] == data

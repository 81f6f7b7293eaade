"""Shared fixtures for the Lokal test-suite."""

from __future__ import annotations

import os
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"lokal-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BASE_URL"] = "http://testserver"
os.environ["APP_TIMEZONE"] = "UTC+3"
os.environ["EMAIL_DISPATCH_INLINE"] = "true"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from lokal.config import get_settings, reset_settings_cache  # noqa: E402
from lokal.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_MEMBER,
    Activity,
    UserPreferences,
    UserProfile,
)
from lokal.infrastructure import database  # noqa: E402
from lokal.infrastructure.email import EmailDeliveryResult  # noqa: E402
from lokal.infrastructure.repositories import (  # noqa: E402
    ActivityRepository,
    PreferencesRepository,
    UserRepository,
)
from lokal.infrastructure.security import create_access_token  # noqa: E402
from lokal.utils import now_in_app_timezone  # noqa: E402


class RecordingEmailClient:
    """Email client double that remembers every send request."""

    def __init__(self, delivered: bool = True) -> None:
        self.delivered = delivered
        self.calls: list[dict[str, str]] = []

    def send(self, *, to: str, subject: str, html: str) -> EmailDeliveryResult:
        self.calls.append({"to": to, "subject": subject, "html": html})
        if self.delivered:
            return EmailDeliveryResult(delivered=True, status_code=200)
        return EmailDeliveryResult(delivered=False, status_code=500, detail="sink down")


@pytest.fixture(autouse=True)
def reset_schema():
    """Give every test empty tables."""

    from lokal.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    reset_settings_cache()


def pytest_sessionfinish(session, exitstatus):
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def email_client() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture()
def notification_service(db_session, email_client):
    from lokal.application.use_cases.notifications import NotificationService

    return NotificationService(db_session, email_client=email_client, settings=get_settings())


@pytest.fixture()
def make_user(db_session):
    """Return a factory creating a member profile with optional preferences."""

    def factory(
        user_id: str,
        *,
        full_name: str | None = None,
        email: str | None = None,
        without_email: bool = False,
        admin: bool = False,
        preferences: dict | None = None,
        with_preferences: bool = True,
    ) -> UserProfile:
        profile = UserRepository(db_session).create(
            UserProfile(
                user_id=user_id,
                full_name=full_name or user_id.title(),
                email=None if without_email else (email or f"{user_id}@example.com"),
                role=ROLE_ADMIN if admin else ROLE_MEMBER,
            )
        )
        if with_preferences:
            PreferencesRepository(db_session).upsert(
                UserPreferences(user_id=user_id, **(preferences or {}))
            )
        return profile

    return factory


@pytest.fixture()
def make_activity(db_session):
    """Return a factory creating an activity and registering attendees."""

    def factory(
        *,
        title: str = "Kahve Tadımı",
        created_by: str | None = None,
        attendees: tuple[str, ...] = (),
        starts_in: timedelta = timedelta(days=2),
        **fields,
    ) -> Activity:
        repository = ActivityRepository(db_session)
        activity = repository.create(
            Activity(
                id=None,
                title=title,
                description="Yeni çekirdekler",
                date_time=now_in_app_timezone() + starts_in,
                created_by=created_by,
                **fields,
            )
        )
        for user_id in attendees:
            repository.add_attendance(activity.id, user_id, user_id.title())
        return activity

    return factory


@pytest.fixture()
def auth_headers():
    """Return a helper building bearer headers for ``user_id``."""

    def build(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return build


@pytest.fixture()
def client(email_client):
    """Return a test client whose notification emails go to ``email_client``."""

    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    from lokal.interfaces.api.dependencies import get_email_client
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_email_client] = lambda: email_client
    with TestClient(app) as test_client:
        yield test_client

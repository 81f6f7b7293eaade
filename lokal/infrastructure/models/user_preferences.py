"""SQLAlchemy model for notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import expression

from lokal.infrastructure.database import Base
from lokal.utils import now_in_app_naive_datetime

from .notification import new_uuid


def _flag(default: bool) -> Column:
    return Column(
        Boolean,
        nullable=False,
        default=default,
        server_default=expression.true() if default else expression.false(),
    )


class UserPreferencesModel(Base):
    """One row of opt-in flags per user."""

    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    email_notifications = _flag(True)
    push_notifications = _flag(True)
    activity_reminders_24h = _flag(True)
    activity_reminders_1h = _flag(True)
    activity_updates = _flag(True)
    new_activities = _flag(True)
    social_notifications = _flag(True)
    marketing_emails = _flag(False)
    preferred_reminder_time = Column(String(5), nullable=False, default="09:00")
    timezone = Column(String(64), nullable=False, default="Europe/Istanbul")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["UserPreferencesModel"]

"""Domain entity holding a user's notification opt-ins."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserPreferences:
    """Per-user channel and notification-type toggles."""

    user_id: str
    email_notifications: bool = True
    push_notifications: bool = True
    activity_reminders_24h: bool = True
    activity_reminders_1h: bool = True
    activity_updates: bool = True
    new_activities: bool = True
    social_notifications: bool = True
    marketing_emails: bool = False
    preferred_reminder_time: str = "09:00"
    timezone: str = "Europe/Istanbul"
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["UserPreferences"]

"""Schemas for notification preference endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PreferencesRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email_notifications: bool
    push_notifications: bool
    activity_reminders_24h: bool
    activity_reminders_1h: bool
    activity_updates: bool
    new_activities: bool
    social_notifications: bool
    marketing_emails: bool
    preferred_reminder_time: str
    timezone: str


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored (or default) value."""

    model_config = ConfigDict(extra="forbid")

    email_notifications: bool | None = None
    push_notifications: bool | None = None
    activity_reminders_24h: bool | None = None
    activity_reminders_1h: bool | None = None
    activity_updates: bool | None = None
    new_activities: bool | None = None
    social_notifications: bool | None = None
    marketing_emails: bool | None = None
    preferred_reminder_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    timezone: str | None = Field(default=None, min_length=1)


__all__ = ["PreferencesRead", "PreferencesUpdate"]

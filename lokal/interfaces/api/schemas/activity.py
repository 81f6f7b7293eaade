"""Schemas for activity endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lokal.domain.entities import ActivityStatus


class ActivityCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    date_time: datetime
    activity_type: str | None = None
    duration_hours: float = Field(default=2, gt=0)
    location: str | None = None
    max_participants: int | None = Field(default=None, ge=1)


class ActivityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    date_time: datetime | None = None
    activity_type: str | None = None
    duration_hours: float | None = Field(default=None, gt=0)
    location: str | None = None
    max_participants: int | None = Field(default=None, ge=1)
    status: ActivityStatus | None = None
    cancellation_reason: str | None = None


class ActivityCancel(BaseModel):
    reason: str | None = None


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    date_time: datetime
    status: ActivityStatus
    activity_type: str | None = None
    duration_hours: float
    location: str | None = None
    max_participants: int | None = None
    created_by: str | None = None
    managed_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AttendanceRead(BaseModel):
    message: str
    activity_id: str


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    activity_id: str
    user_id: str
    content: str
    created_at: datetime | None = None


class ReminderRead(BaseModel):
    activity_id: str
    hours_before_event: int
    notified: int


__all__ = [
    "ActivityCancel",
    "ActivityCreate",
    "ActivityRead",
    "ActivityUpdate",
    "AttendanceRead",
    "CommentCreate",
    "CommentRead",
    "ReminderRead",
]

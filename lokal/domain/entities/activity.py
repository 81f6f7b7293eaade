"""Domain entities for café activities and their attendance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ActivityStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class Activity:
    """Event organised at the café that members can join."""

    id: str | None
    title: str
    description: str
    date_time: datetime
    status: ActivityStatus = ActivityStatus.UPCOMING
    activity_type: str | None = None
    duration_hours: float = 2
    location: str | None = None
    max_participants: int | None = None
    created_by: str | None = None
    managed_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_managed_by(self, user_id: str) -> bool:
        return user_id in {self.created_by, self.managed_by}


@dataclass
class ActivityAttendance:
    id: str | None
    activity_id: str
    user_id: str
    user_name: str
    attended: bool = False
    created_at: datetime | None = None


@dataclass
class ActivityComment:
    id: str | None
    activity_id: str
    user_id: str
    content: str
    created_at: datetime | None = None


__all__ = ["Activity", "ActivityAttendance", "ActivityComment", "ActivityStatus"]

"""Use case for publishing a new activity."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import NotificationFanout
from lokal.domain.entities import Activity, UserProfile
from lokal.infrastructure.repositories import ActivityRepository

from .common import log_fanout_failure


def create_activity(
    session: Session,
    *,
    current_user: UserProfile,
    title: str,
    description: str,
    date_time: datetime,
    activity_type: str | None = None,
    duration_hours: float = 2,
    location: str | None = None,
    max_participants: int | None = None,
    fanout: NotificationFanout | None = None,
) -> Activity:
    """Store the activity and announce it to members who opted in."""

    if not current_user.is_admin():
        raise PermissionError("Admin access required")
    if not title.strip() or not description.strip():
        raise ValueError("Missing required fields: title, description, date_time")

    activity = ActivityRepository(session).create(
        Activity(
            id=None,
            title=title.strip(),
            description=description.strip(),
            date_time=date_time,
            activity_type=activity_type,
            duration_hours=duration_hours,
            location=location,
            max_participants=max_participants,
            created_by=current_user.user_id,
        )
    )

    if fanout is not None:
        log_fanout_failure("new activity", activity.id, fanout.notify_new_activity(activity.id))
    return activity


__all__ = ["create_activity"]

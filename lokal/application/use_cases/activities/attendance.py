"""Use cases for joining and leaving activities."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from lokal.domain.entities import ActivityStatus, UserProfile
from lokal.infrastructure.repositories import ActivityRepository
from lokal.utils import ensure_app_timezone, now_in_app_timezone

from .common import get_activity

LEAVE_CUTOFF = timedelta(hours=2)


def _display_name(user: UserProfile) -> str:
    if user.full_name:
        return user.full_name
    if user.email:
        return user.email.split("@")[0]
    return "Unknown User"


def join_activity(
    session: Session,
    activity_id: str,
    *,
    current_user: UserProfile,
    now: datetime | None = None,
) -> None:
    """Register ``current_user`` for an upcoming activity that still has room."""

    activity = get_activity(session, activity_id)
    now = ensure_app_timezone(now) if now else now_in_app_timezone()

    if activity.status != ActivityStatus.UPCOMING:
        raise ValueError("Activity is not available for registration")
    if activity.date_time <= now:
        raise ValueError("Cannot join past activities")

    repository = ActivityRepository(session)
    if repository.get_attendance(activity_id, current_user.user_id) is not None:
        raise ValueError("You are already registered for this activity")
    if (
        activity.max_participants
        and repository.count_attendance(activity_id) >= activity.max_participants
    ):
        raise ValueError("Activity is full")

    repository.add_attendance(activity_id, current_user.user_id, _display_name(current_user))


def leave_activity(
    session: Session,
    activity_id: str,
    *,
    current_user: UserProfile,
    now: datetime | None = None,
) -> None:
    activity = get_activity(session, activity_id)
    now = ensure_app_timezone(now) if now else now_in_app_timezone()

    if activity.date_time - now < LEAVE_CUTOFF:
        raise ValueError("Cannot leave activity less than 2 hours before start time")
    if activity.status in {ActivityStatus.COMPLETED, ActivityStatus.ONGOING}:
        raise ValueError("Cannot leave completed or ongoing activity")

    repository = ActivityRepository(session)
    if not repository.remove_attendance(activity_id, current_user.user_id):
        raise ValueError("You are not registered for this activity")


__all__ = ["LEAVE_CUTOFF", "join_activity", "leave_activity"]

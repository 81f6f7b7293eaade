"""Use cases for editing and cancelling activities."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import (
    UPDATE_TYPE_CANCELLED,
    UPDATE_TYPE_UPDATE,
    NotificationFanout,
)
from lokal.domain.entities import Activity, ActivityStatus, UserProfile
from lokal.infrastructure.repositories import ActivityRepository

from .common import get_activity, log_fanout_failure

# Changing any of these tells attendees the activity was updated.
NOTIFIABLE_FIELDS = ("title", "date_time", "location")


def _ensure_can_manage(activity: Activity, current_user: UserProfile) -> None:
    if current_user.is_admin() or activity.is_managed_by(current_user.user_id):
        return
    raise PermissionError("Not allowed to manage this activity")


def update_activity(
    session: Session,
    activity_id: str,
    *,
    current_user: UserProfile,
    changes: dict[str, Any],
    cancellation_reason: str | None = None,
    fanout: NotificationFanout | None = None,
) -> Activity:
    """Apply ``changes`` and notify attendees about what changed.

    Moving the activity to ``cancelled`` sends the cancellation copy with
    ``cancellation_reason``; otherwise a change to any of
    :data:`NOTIFIABLE_FIELDS` sends the update copy.
    """

    current = get_activity(session, activity_id)
    _ensure_can_manage(current, current_user)

    if "status" in changes:
        try:
            changes["status"] = ActivityStatus(changes["status"])
        except ValueError as exc:
            raise ValueError("Invalid status parameter") from exc

    updated = ActivityRepository(session).update(activity_id, changes)

    if fanout is None:
        return updated
    if (
        updated.status == ActivityStatus.CANCELLED
        and current.status != ActivityStatus.CANCELLED
    ):
        log_fanout_failure(
            "cancellation",
            activity_id,
            fanout.notify_activity_update(
                activity_id, UPDATE_TYPE_CANCELLED, cancellation_reason
            ),
        )
    elif any(getattr(current, name) != getattr(updated, name) for name in NOTIFIABLE_FIELDS):
        log_fanout_failure(
            "update", activity_id, fanout.notify_activity_update(activity_id, UPDATE_TYPE_UPDATE)
        )
    return updated


def cancel_activity(
    session: Session,
    activity_id: str,
    *,
    current_user: UserProfile,
    reason: str | None = None,
    fanout: NotificationFanout | None = None,
) -> Activity:
    """Soft-delete an activity by moving it to ``cancelled``."""

    return update_activity(
        session,
        activity_id,
        current_user=current_user,
        changes={"status": ActivityStatus.CANCELLED},
        cancellation_reason=reason,
        fanout=fanout,
    )


__all__ = ["NOTIFIABLE_FIELDS", "cancel_activity", "update_activity"]

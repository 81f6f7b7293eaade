"""Use case for commenting on an activity."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import NotificationFanout
from lokal.domain.entities import ActivityComment, UserProfile
from lokal.infrastructure.repositories import ActivityRepository

from .common import get_activity, log_fanout_failure


def add_comment(
    session: Session,
    activity_id: str,
    *,
    current_user: UserProfile,
    content: str,
    fanout: NotificationFanout | None = None,
) -> ActivityComment:
    """Store the comment and tell the activity creator about it."""

    get_activity(session, activity_id)
    if not content.strip():
        raise ValueError("Comment content is required")

    comment = ActivityRepository(session).add_comment(
        ActivityComment(
            id=None,
            activity_id=activity_id,
            user_id=current_user.user_id,
            content=content.strip(),
        )
    )
    if fanout is not None:
        log_fanout_failure(
            "comment",
            activity_id,
            fanout.notify_new_comment(activity_id, current_user.user_id, comment.content),
        )
    return comment


__all__ = ["add_comment"]

"""Use case for following another member."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import NotificationFanout
from lokal.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)


def follow_user(
    session: Session,
    *,
    follower_id: str,
    followee_id: str,
    fanout: NotificationFanout | None = None,
) -> bool:
    """Create the follow connection; return ``False`` when it already existed."""

    if follower_id == followee_id:
        raise ValueError("You cannot follow yourself")

    repository = UserRepository(session)
    if repository.get(followee_id) is None:
        raise LookupError("User not found")
    if repository.is_following(follower_id, followee_id):
        return False

    repository.add_follow(follower_id, followee_id)
    if fanout is not None:
        result = fanout.notify_new_follower(followee_id, follower_id)
        if not result.ok:
            logger.warning(
                "Could not notify %s about new follower %s: %s",
                followee_id,
                follower_id,
                result.error,
            )
    return True


__all__ = ["follow_user"]

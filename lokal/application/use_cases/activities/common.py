"""Shared lookups for the activity use cases."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from lokal.domain.entities import Activity
from lokal.domain.results import OperationResult
from lokal.infrastructure.repositories import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityNotFoundError(ValueError):
    """Raised when an activity identifier does not resolve to a row."""


def get_activity(session: Session, activity_id: str) -> Activity:
    activity = ActivityRepository(session).get(activity_id)
    if activity is None:
        raise ActivityNotFoundError("Activity not found")
    return activity


def log_fanout_failure(event: str, activity_id: str, result: OperationResult[int]) -> None:
    if not result.ok:
        logger.warning(
            "Could not notify about %s for activity %s: %s", event, activity_id, result.error
        )


__all__ = ["ActivityNotFoundError", "get_activity", "log_fanout_failure"]

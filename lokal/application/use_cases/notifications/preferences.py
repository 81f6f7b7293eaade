"""Read access to notification preferences for the notification subsystem."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lokal.domain.entities import UserPreferences
from lokal.domain.results import ErrorKind, OperationResult
from lokal.infrastructure.repositories import PreferencesRepository

logger = logging.getLogger(__name__)


def get_preferences(session: Session, user_id: str) -> OperationResult[UserPreferences]:
    """Return the preferences row for ``user_id``.

    A missing row is a successful ``None``. Store errors are logged and
    reported as failures; callers treat both as "no confirmed opt-in".
    """

    try:
        return OperationResult.success(PreferencesRepository(session).get_by_user(user_id))
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error fetching preferences for user %s: %s", user_id, exc)
        return OperationResult.failure(ErrorKind.STORE, "Could not load preferences")


def update_preferences(
    session: Session, preferences: UserPreferences
) -> OperationResult[UserPreferences]:
    """Create or replace the preferences row owned by ``preferences.user_id``."""

    try:
        return OperationResult.success(PreferencesRepository(session).upsert(preferences))
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error saving preferences for user %s: %s", preferences.user_id, exc)
        return OperationResult.failure(ErrorKind.STORE, "Could not save preferences")


__all__ = ["get_preferences", "update_preferences"]

"""Periodic jobs over the notification table."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from lokal.domain.results import ErrorKind, OperationResult
from lokal.utils import days_before, now_in_app_timezone

from .email_dispatch import email_allowed
from .preferences import get_preferences
from .service import NotificationService

logger = logging.getLogger(__name__)


def process_scheduled_notifications(
    service: NotificationService, *, now: datetime | None = None
) -> OperationResult[int]:
    """Release notifications whose ``scheduled_for`` has passed.

    Each due row gets its schedule cleared and, unless already emailed, goes
    through the same preference gate as a freshly created notification.
    """

    now = now or now_in_app_timezone()
    try:
        due = service.notifications.list_due_scheduled(now)
    except SQLAlchemyError as exc:
        service.session.rollback()
        logger.error("Error fetching scheduled notifications: %s", exc)
        return OperationResult.failure(ErrorKind.STORE, "Could not read scheduled notifications")

    processed = 0
    for notification in due:
        try:
            service.notifications.clear_schedule(notification.id)
        except SQLAlchemyError as exc:
            service.session.rollback()
            logger.error("Error releasing scheduled notification %s: %s", notification.id, exc)
            continue
        processed += 1
        notification.scheduled_for = None

        if notification.is_email_sent:
            continue
        preferences = get_preferences(service.session, notification.user_id).value
        if email_allowed(notification, preferences):
            service.dispatch_email(notification)

    if processed:
        service.publisher.notify_changed(
            (notification.user_id for notification in due), reason="scheduled"
        )
        logger.info("Released %s scheduled notification(s)", processed)
    return OperationResult.success(processed)


def cleanup_old_notifications(
    service: NotificationService,
    *,
    now: datetime | None = None,
    retention_days: int | None = None,
) -> OperationResult[int]:
    """Delete every notification created more than ``retention_days`` ago."""

    days = retention_days or service.settings.notification_retention_days
    cutoff = days_before(now or now_in_app_timezone(), days)
    try:
        deleted = service.notifications.delete_created_before(cutoff)
    except SQLAlchemyError as exc:
        service.session.rollback()
        logger.error("Error cleaning up old notifications: %s", exc)
        return OperationResult.failure(ErrorKind.STORE, "Could not clean up notifications")
    logger.info("Deleted %s notification(s) older than %s days", deleted, days)
    return OperationResult.success(deleted)


def process_email_outbox(
    service: NotificationService,
    *,
    now: datetime | None = None,
    batch_size: int = 50,
) -> OperationResult[int]:
    """Deliver queued notification emails that are due."""

    return service.outbox.process(now=now, batch_size=batch_size)


__all__ = [
    "cleanup_old_notifications",
    "process_email_outbox",
    "process_scheduled_notifications",
]

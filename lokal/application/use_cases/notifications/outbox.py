"""Outbox that decouples notification emails from notification creation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lokal.config import Settings, get_settings
from lokal.domain.entities import EmailTask, EmailTaskStatus, Notification
from lokal.domain.results import ErrorKind, OperationResult
from lokal.infrastructure.repositories import EmailOutboxRepository, NotificationRepository
from lokal.utils import now_in_app_timezone

from .email_dispatch import EmailDispatcher

logger = logging.getLogger(__name__)


def backoff_delay(attempts: int, *, base_seconds: int, max_seconds: int) -> timedelta:
    """Return the wait before retry number ``attempts + 1``."""

    exponent = max(attempts - 1, 0)
    return timedelta(seconds=min(base_seconds * (2**exponent), max_seconds))


class EmailOutbox:
    """Persist email tasks and deliver them with retry and backoff.

    Delivery is at-least-once: a send that succeeds but fails to be recorded
    is retried.
    """

    def __init__(
        self,
        session: Session,
        dispatcher: EmailDispatcher,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.dispatcher = dispatcher
        self.settings = settings or get_settings()
        self.tasks = EmailOutboxRepository(session)
        self.notifications = NotificationRepository(session)

    def enqueue(self, notification: Notification) -> OperationResult[EmailTask]:
        try:
            task = self.tasks.enqueue(
                notification_id=notification.id,
                user_id=notification.user_id,
                due_at=now_in_app_timezone(),
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error queueing email for notification %s: %s", notification.id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not queue email")
        return OperationResult.success(task)

    def deliver(self, task: EmailTask, *, now: datetime | None = None) -> OperationResult[bool]:
        """Attempt ``task`` once and record the outcome."""

        now = now or now_in_app_timezone()
        try:
            notification = self.notifications.get(task.notification_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error loading notification %s: %s", task.notification_id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not load notification")

        if notification is None:
            task.status = EmailTaskStatus.FAILED
            task.last_error = "Notification no longer exists"
            return self._save(task, OperationResult.success(False))
        if notification.is_email_sent:
            task.status = EmailTaskStatus.SENT
            return self._save(task, OperationResult.success(False))

        result = self.dispatcher.send_email_notification(task.user_id, notification)
        task.attempts += 1
        if result.ok:
            task.status = EmailTaskStatus.SENT
            task.last_error = None
            return self._save(task, OperationResult.success(True))

        task.last_error = result.error
        if (
            result.error_kind == ErrorKind.NOT_FOUND
            or task.attempts >= self.settings.email_outbox_max_attempts
        ):
            task.status = EmailTaskStatus.FAILED
            logger.warning(
                "Giving up on email for notification %s after %s attempt(s): %s",
                task.notification_id,
                task.attempts,
                result.error,
            )
        else:
            task.next_attempt_at = now + backoff_delay(
                task.attempts,
                base_seconds=self.settings.email_outbox_backoff_seconds,
                max_seconds=self.settings.email_outbox_max_backoff_seconds,
            )
        return self._save(task, result)

    def process(
        self, *, now: datetime | None = None, batch_size: int = 50
    ) -> OperationResult[int]:
        """Deliver every due pending task; return how many emails went out."""

        now = now or now_in_app_timezone()
        try:
            due = self.tasks.list_due(now, limit=batch_size)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching due email tasks: %s", exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not read email outbox")

        delivered = 0
        for task in due:
            if self.deliver(task, now=now).value:
                delivered += 1
        if due:
            logger.info("Email outbox processed %s task(s), %s delivered", len(due), delivered)
        return OperationResult.success(delivered)

    def _save(
        self, task: EmailTask, outcome: OperationResult[bool]
    ) -> OperationResult[bool]:
        try:
            self.tasks.save(task)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error updating email task %s: %s", task.id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not update email task")
        return outcome


__all__ = ["EmailOutbox", "backoff_delay"]

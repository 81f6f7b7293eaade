"""Notification store operations with preference-gated email."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lokal.config import Settings, get_settings
from lokal.domain.entities import (
    Notification,
    NotificationData,
    NotificationFilter,
    NotificationOrdering,
    NotificationPage,
)
from lokal.domain.results import ErrorKind, OperationResult
from lokal.infrastructure.email_api import EmailApiClient, EmailClient
from lokal.infrastructure.notifications import NotificationPublisher, notification_publisher
from lokal.infrastructure.repositories import NotificationRepository
from lokal.utils import now_in_app_timezone

from .email_dispatch import EmailDispatcher, email_allowed
from .outbox import EmailOutbox
from .preferences import get_preferences

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class NotificationService:
    """Create, list and update notifications for one database session.

    Public methods return :class:`OperationResult` and never raise store
    errors; failures are logged with context.
    """

    def __init__(
        self,
        session: Session,
        *,
        email_client: EmailClient | None = None,
        publisher: NotificationPublisher | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.notifications = NotificationRepository(session)
        self.publisher = publisher or notification_publisher
        self.dispatcher = EmailDispatcher(
            session, email_client or EmailApiClient(self.settings), settings=self.settings
        )
        self.outbox = EmailOutbox(session, self.dispatcher, settings=self.settings)

    def create_notification(self, data: NotificationData) -> OperationResult[Notification]:
        """Persist one notification and email it when the user opted in."""

        try:
            notification = Notification.from_data(data)
        except ValueError as exc:
            return OperationResult.failure(ErrorKind.INVALID, str(exc))

        preferences = get_preferences(self.session, data.user_id).value
        if preferences is None:
            logger.warning("No preferences found for user %s", data.user_id)

        try:
            saved = self.notifications.create(notification)
        except SQLAlchemyError as exc:
            return self._store_failure("creating notification", exc)

        self.publisher.notify_changed([saved.user_id], reason="created")

        if email_allowed(saved, preferences) and not saved.is_scheduled_after(
            now_in_app_timezone()
        ):
            if self.dispatch_email(saved).value:
                saved.is_email_sent = True
        return OperationResult.success(saved)

    def create_bulk_notifications(
        self, items: Sequence[NotificationData]
    ) -> OperationResult[int]:
        """Insert every payload in one transaction.

        Unlike :meth:`create_notification` this never queues email.
        """

        try:
            notifications = [Notification.from_data(item) for item in items]
        except ValueError as exc:
            return OperationResult.failure(ErrorKind.INVALID, str(exc))
        if not notifications:
            return OperationResult.success(0)

        try:
            created = self.notifications.create_many(notifications)
        except SQLAlchemyError as exc:
            return self._store_failure("creating bulk notifications", exc)

        self.publisher.notify_changed(
            (notification.user_id for notification in notifications), reason="created"
        )
        return OperationResult.success(created)

    def dispatch_email(self, notification: Notification) -> OperationResult[bool]:
        """Queue an email for ``notification``; send it now when inline dispatch is on."""

        queued = self.outbox.enqueue(notification)
        if not queued.ok:
            return OperationResult.failure(queued.error_kind, queued.error)
        if not self.settings.email_dispatch_inline:
            return OperationResult.success(False)
        return self.outbox.deliver(queued.value)

    def mark_as_read(self, user_id: str, notification_ids: Sequence[str]) -> OperationResult[int]:
        return self._set_read_state(user_id, notification_ids, is_read=True)

    def mark_as_unread(
        self, user_id: str, notification_ids: Sequence[str]
    ) -> OperationResult[int]:
        return self._set_read_state(user_id, notification_ids, is_read=False)

    def delete_notifications(
        self, user_id: str, notification_ids: Sequence[str]
    ) -> OperationResult[int]:
        try:
            deleted = self.notifications.delete_for_user(notification_ids, user_id=user_id)
        except SQLAlchemyError as exc:
            return self._store_failure("deleting notifications", exc)
        if deleted:
            self.publisher.notify_changed([user_id], reason="deleted")
        return OperationResult.success(deleted)

    def list_notifications(
        self,
        user_id: str,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        filter_by: NotificationFilter = NotificationFilter.ALL,
        order_by: NotificationOrdering = NotificationOrdering.CREATED_AT,
    ) -> OperationResult[NotificationPage]:
        """Return page ``page`` (1-based) of the user's notifications, newest first."""

        if page < 1 or limit < 1:
            return OperationResult.failure(ErrorKind.INVALID, "Invalid pagination parameters")
        offset = (page - 1) * limit
        try:
            notifications, count = self.notifications.list_for_user(
                user_id,
                offset=offset,
                limit=limit,
                filter_by=NotificationFilter(filter_by),
                order_by=NotificationOrdering(order_by),
            )
        except SQLAlchemyError as exc:
            return self._store_failure("fetching notifications", exc)
        return OperationResult.success(
            NotificationPage(
                notifications=notifications,
                count=count,
                has_more=count > offset + len(notifications),
            )
        )

    def unread_count(self, user_id: str) -> OperationResult[int]:
        try:
            return OperationResult.success(self.notifications.count_unread(user_id))
        except SQLAlchemyError as exc:
            return self._store_failure("counting unread notifications", exc)

    def _set_read_state(
        self, user_id: str, notification_ids: Sequence[str], *, is_read: bool
    ) -> OperationResult[int]:
        try:
            updated = self.notifications.set_read_state(
                notification_ids, user_id=user_id, is_read=is_read
            )
        except SQLAlchemyError as exc:
            return self._store_failure("updating notification read state", exc)
        if updated:
            self.publisher.notify_changed([user_id], reason="read" if is_read else "unread")
        return OperationResult.success(updated)

    def _store_failure(self, action: str, exc: SQLAlchemyError) -> OperationResult:
        self.session.rollback()
        logger.error("Error %s: %s", action, exc)
        return OperationResult.failure(ErrorKind.STORE, f"Error {action}")


__all__ = ["DEFAULT_PAGE_SIZE", "NotificationService"]

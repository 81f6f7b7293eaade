"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from lokal.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationFilter,
    NotificationOrdering,
    NotificationType,
    RelatedType,
)
from lokal.infrastructure.models import NotificationModel
from lokal.utils import ensure_app_naive_datetime, ensure_app_timezone


def _unique_ids(notification_ids: Iterable[str | None]) -> list[str]:
    unique: list[str] = []
    for notification_id in notification_ids:
        if notification_id and notification_id not in unique:
            unique.append(notification_id)
    return unique


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Methods commit their own unit of work and let SQLAlchemy errors propagate;
    callers decide how failures surface.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def create_many(self, notifications: Sequence[Notification]) -> int:
        """Insert every notification in a single transaction."""

        models = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            models.append(model)
        if not models:
            return 0
        self.session.add_all(models)
        self.session.commit()
        return len(models)

    def set_read_state(
        self, notification_ids: Iterable[str], *, user_id: str, is_read: bool
    ) -> int:
        ids = _unique_ids(notification_ids)
        if not ids:
            return 0
        affected = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.id.in_(ids),
            )
            .update({NotificationModel.is_read: is_read}, synchronize_session=False)
        )
        self.session.commit()
        return affected

    def delete_for_user(self, notification_ids: Iterable[str], *, user_id: str) -> int:
        ids = _unique_ids(notification_ids)
        if not ids:
            return 0
        affected = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.id.in_(ids),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return affected

    def list_for_user(
        self,
        user_id: str,
        *,
        offset: int = 0,
        limit: int = 20,
        filter_by: NotificationFilter = NotificationFilter.ALL,
        order_by: NotificationOrdering = NotificationOrdering.CREATED_AT,
    ) -> tuple[list[Notification], int]:
        """Return one page of notifications and the total matching count."""

        query = self._filtered_query(user_id, filter_by)
        total = query.order_by(None).count()
        order_column = (
            NotificationModel.updated_at
            if order_by == NotificationOrdering.UPDATED_AT
            else NotificationModel.created_at
        )
        models = (
            query.order_by(order_column.desc(), NotificationModel.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
            or 0
        )

    def mark_email_sent(self, notification_id: str) -> None:
        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        ).update({NotificationModel.is_email_sent: True}, synchronize_session=False)
        self.session.commit()

    def list_due_scheduled(self, now: datetime) -> list[Notification]:
        """Return notifications whose schedule is set and has elapsed."""

        cutoff = ensure_app_naive_datetime(now)
        models = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.scheduled_for.isnot(None))
            .filter(NotificationModel.scheduled_for <= cutoff)
            .order_by(NotificationModel.scheduled_for.asc())
            .all()
        )
        return [self._to_entity(model) for model in models]

    def clear_schedule(self, notification_id: str) -> None:
        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        ).update({NotificationModel.scheduled_for: None}, synchronize_session=False)
        self.session.commit()

    def delete_created_before(self, cutoff: datetime) -> int:
        affected = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.created_at < ensure_app_naive_datetime(cutoff))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return affected

    def _filtered_query(self, user_id: str, filter_by: NotificationFilter) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if filter_by == NotificationFilter.UNREAD:
            query = query.filter(NotificationModel.is_read.is_(False))
        elif filter_by == NotificationFilter.ACTIVITY:
            query = query.filter(
                NotificationModel.category == NotificationCategory.ACTIVITY.value
            )
        elif filter_by == NotificationFilter.SOCIAL:
            query = query.filter(
                NotificationModel.category == NotificationCategory.SOCIAL.value
            )
        return query

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.user_id = notification.user_id
        model.title = notification.title
        model.message = notification.message
        model.type = NotificationType(notification.type).value
        model.category = NotificationCategory(notification.category).value
        model.is_read = notification.is_read
        model.is_email_sent = notification.is_email_sent
        model.related_id = notification.related_id
        model.related_type = (
            RelatedType(notification.related_type).value
            if notification.related_type
            else None
        )
        model.action_url = notification.action_url
        model.scheduled_for = ensure_app_naive_datetime(notification.scheduled_for)
        if notification.created_at is not None:
            model.created_at = ensure_app_naive_datetime(notification.created_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            category=NotificationCategory(model.category),
            is_read=bool(model.is_read),
            is_email_sent=bool(model.is_email_sent),
            related_id=model.related_id,
            related_type=RelatedType(model.related_type) if model.related_type else None,
            action_url=model.action_url,
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]

"""Persistence helpers for the notification email outbox."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from lokal.domain.entities import EmailTask, EmailTaskStatus
from lokal.infrastructure.models import EmailOutboxModel
from lokal.utils import ensure_app_naive_datetime, ensure_app_timezone


class EmailOutboxRepository:
    """Queue operations over :class:`EmailTask` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def enqueue(self, *, notification_id: str, user_id: str, due_at: datetime) -> EmailTask:
        model = EmailOutboxModel(
            notification_id=notification_id,
            user_id=user_id,
            status=EmailTaskStatus.PENDING.value,
            attempts=0,
            next_attempt_at=ensure_app_naive_datetime(due_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_due(self, now: datetime, *, limit: int = 50) -> list[EmailTask]:
        query = (
            self.session.query(EmailOutboxModel)
            .filter(EmailOutboxModel.status == EmailTaskStatus.PENDING.value)
            .filter(EmailOutboxModel.next_attempt_at <= ensure_app_naive_datetime(now))
            .order_by(EmailOutboxModel.next_attempt_at.asc(), EmailOutboxModel.id.asc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_for_notification(self, notification_id: str) -> list[EmailTask]:
        query = self.session.query(EmailOutboxModel).filter(
            EmailOutboxModel.notification_id == notification_id
        )
        return [self._to_entity(model) for model in query.all()]

    def save(self, task: EmailTask) -> EmailTask:
        model = self.session.get(EmailOutboxModel, task.id)
        if model is None:
            msg = f"Email task with id {task.id} not found"
            raise ValueError(msg)
        model.status = EmailTaskStatus(task.status).value
        model.attempts = task.attempts
        model.next_attempt_at = ensure_app_naive_datetime(task.next_attempt_at)
        model.last_error = task.last_error
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: EmailOutboxModel) -> EmailTask:
        return EmailTask(
            id=model.id,
            notification_id=model.notification_id,
            user_id=model.user_id,
            status=EmailTaskStatus(model.status),
            attempts=model.attempts,
            next_attempt_at=ensure_app_timezone(model.next_attempt_at),
            last_error=model.last_error,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["EmailOutboxRepository"]

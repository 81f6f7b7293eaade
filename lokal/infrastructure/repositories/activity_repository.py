"""Persistence helpers for activities and their attendance."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from lokal.domain.entities import Activity, ActivityAttendance, ActivityComment, ActivityStatus
from lokal.infrastructure.models import (
    ActivityAttendanceModel,
    ActivityCommentModel,
    ActivityModel,
)
from lokal.utils import ensure_app_naive_datetime, ensure_app_timezone

_UPDATABLE_FIELDS = (
    "title",
    "description",
    "activity_type",
    "date_time",
    "duration_hours",
    "location",
    "max_participants",
    "status",
)


class ActivityRepository:
    """Provide CRUD operations for :class:`Activity` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, activity_id: str) -> Activity | None:
        model = self.session.get(ActivityModel, activity_id)
        return self._to_entity(model) if model else None

    def create(self, activity: Activity) -> Activity:
        model = ActivityModel(
            title=activity.title,
            description=activity.description,
            activity_type=activity.activity_type,
            date_time=ensure_app_naive_datetime(activity.date_time),
            duration_hours=activity.duration_hours,
            location=activity.location,
            max_participants=activity.max_participants,
            created_by=activity.created_by,
            managed_by=activity.managed_by,
            status=ActivityStatus(activity.status).value,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, activity_id: str, changes: dict[str, Any]) -> Activity:
        model = self.session.get(ActivityModel, activity_id)
        if model is None:
            msg = f"Activity with id {activity_id} not found"
            raise ValueError(msg)
        for name, value in changes.items():
            if name not in _UPDATABLE_FIELDS:
                continue
            if name == "date_time":
                value = ensure_app_naive_datetime(value)
            elif name == "status":
                value = ActivityStatus(value).value
            setattr(model, name, value)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_attendee_ids(self, activity_id: str) -> list[str]:
        query = (
            self.session.query(ActivityAttendanceModel.user_id)
            .filter(ActivityAttendanceModel.activity_id == activity_id)
            .order_by(ActivityAttendanceModel.created_at.asc())
        )
        return [user_id for (user_id,) in query.all()]

    def count_attendance(self, activity_id: str) -> int:
        return (
            self.session.query(func.count(ActivityAttendanceModel.id))
            .filter(ActivityAttendanceModel.activity_id == activity_id)
            .scalar()
            or 0
        )

    def get_attendance(self, activity_id: str, user_id: str) -> ActivityAttendance | None:
        model = (
            self.session.query(ActivityAttendanceModel)
            .filter_by(activity_id=activity_id, user_id=user_id)
            .first()
        )
        if model is None:
            return None
        return ActivityAttendance(
            id=model.id,
            activity_id=model.activity_id,
            user_id=model.user_id,
            user_name=model.user_name,
            attended=bool(model.attended),
            created_at=ensure_app_timezone(model.created_at),
        )

    def add_attendance(self, activity_id: str, user_id: str, user_name: str) -> None:
        self.session.add(
            ActivityAttendanceModel(
                activity_id=activity_id, user_id=user_id, user_name=user_name
            )
        )
        self.session.commit()

    def remove_attendance(self, activity_id: str, user_id: str) -> int:
        affected = (
            self.session.query(ActivityAttendanceModel)
            .filter_by(activity_id=activity_id, user_id=user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return affected

    def add_comment(self, comment: ActivityComment) -> ActivityComment:
        model = ActivityCommentModel(
            activity_id=comment.activity_id,
            user_id=comment.user_id,
            content=comment.content,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return ActivityComment(
            id=model.id,
            activity_id=model.activity_id,
            user_id=model.user_id,
            content=model.content,
            created_at=ensure_app_timezone(model.created_at),
        )

    @staticmethod
    def _to_entity(model: ActivityModel) -> Activity:
        return Activity(
            id=model.id,
            title=model.title,
            description=model.description,
            activity_type=model.activity_type,
            date_time=ensure_app_timezone(model.date_time),
            duration_hours=model.duration_hours,
            location=model.location,
            max_participants=model.max_participants,
            created_by=model.created_by,
            managed_by=model.managed_by,
            status=ActivityStatus(model.status),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["ActivityRepository"]

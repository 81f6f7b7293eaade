"""Persistence helpers for notification preferences."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lokal.domain.entities import UserPreferences
from lokal.infrastructure.models import UserPreferencesModel
from lokal.utils import ensure_app_timezone

_FLAG_FIELDS = (
    "email_notifications",
    "push_notifications",
    "activity_reminders_24h",
    "activity_reminders_1h",
    "activity_updates",
    "new_activities",
    "social_notifications",
    "marketing_emails",
)


class PreferencesRepository:
    """Read and upsert :class:`UserPreferences` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user(self, user_id: str) -> UserPreferences | None:
        model = (
            self.session.query(UserPreferencesModel)
            .filter(UserPreferencesModel.user_id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_user_ids_with(self, flag: str) -> list[str]:
        """Return ids of users whose ``flag`` toggle is enabled."""

        if flag not in _FLAG_FIELDS:
            raise ValueError(f"Unknown preference flag: {flag}")
        column = getattr(UserPreferencesModel, flag)
        query = self.session.query(UserPreferencesModel.user_id).filter(column.is_(True))
        return [user_id for (user_id,) in query.all()]

    def upsert(self, preferences: UserPreferences) -> UserPreferences:
        model = (
            self.session.query(UserPreferencesModel)
            .filter(UserPreferencesModel.user_id == preferences.user_id)
            .first()
        )
        if model is None:
            model = UserPreferencesModel(user_id=preferences.user_id)
            self.session.add(model)
        for name in _FLAG_FIELDS:
            setattr(model, name, bool(getattr(preferences, name)))
        model.preferred_reminder_time = preferences.preferred_reminder_time
        model.timezone = preferences.timezone
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserPreferencesModel) -> UserPreferences:
        return UserPreferences(
            id=model.id,
            user_id=model.user_id,
            preferred_reminder_time=model.preferred_reminder_time,
            timezone=model.timezone,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            **{name: bool(getattr(model, name)) for name in _FLAG_FIELDS},
        )


__all__ = ["PreferencesRepository"]

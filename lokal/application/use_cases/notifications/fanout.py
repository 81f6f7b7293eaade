"""Turn activity and social events into notifications for their audience."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError

from lokal.domain.entities import (
    Activity,
    NotificationData,
    NotificationType,
    RelatedType,
    UserProfile,
)
from lokal.domain.results import ErrorKind, OperationResult
from lokal.infrastructure.repositories import (
    ActivityRepository,
    PreferencesRepository,
    UserRepository,
)

from .service import NotificationService

logger = logging.getLogger(__name__)

UPDATE_TYPE_UPDATE = "update"
UPDATE_TYPE_CANCELLED = "cancelled"


def _unique(user_ids: Iterable[str | None]) -> list[str]:
    unique: list[str] = []
    for user_id in user_ids:
        if user_id and user_id not in unique:
            unique.append(user_id)
    return unique


def _activity_url(activity_id: str) -> str:
    return f"/activities/{activity_id}"


class NotificationFanout:
    """Resolve recipients for a domain event and create their notifications.

    Every operation returns the number of notifications created; an empty
    audience is a successful zero.
    """

    def __init__(self, service: NotificationService) -> None:
        self.service = service
        self.session = service.session
        self.activities = ActivityRepository(self.session)
        self.preferences = PreferencesRepository(self.session)
        self.users = UserRepository(self.session)

    def send_activity_reminders(
        self, activity_id: str, hours_before_event: int
    ) -> OperationResult[int]:
        resolved = self._activity_with_attendees(activity_id)
        if not resolved.ok:
            return OperationResult.failure(resolved.error_kind, resolved.error)
        activity, user_ids = resolved.value
        if not user_ids:
            logger.info("No registered users for activity %s", activity_id)
            return OperationResult.success(0)

        if hours_before_event == 24:
            notification_type = NotificationType.ACTIVITY_REMINDER_24H
            title = "Etkinlik Hatırlatması"
            when = "yarın"
        else:
            notification_type = NotificationType.ACTIVITY_REMINDER_1H
            title = "Etkinlik Yakında"
            when = "1 saat içinde"

        return self._create_for_all(
            user_ids,
            notification_type=notification_type,
            title=title,
            message=f"{activity.title} etkinliği {when} başlayacak!",
            activity_id=activity_id,
        )

    def notify_new_activity(self, activity_id: str) -> OperationResult[int]:
        found = self._get_activity(activity_id)
        if not found.ok:
            return OperationResult.failure(found.error_kind, found.error)
        activity = found.value

        try:
            user_ids = _unique(self.preferences.list_user_ids_with("new_activities"))
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching user preferences: %s", exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not resolve audience")

        if not user_ids:
            logger.info("No users subscribed to new activity notifications")
            return OperationResult.success(0)

        return self._create_for_all(
            user_ids,
            notification_type=NotificationType.NEW_ACTIVITY,
            title="Yeni Etkinlik",
            message=f"{activity.title} adlı yeni bir etkinlik eklendi!",
            activity_id=activity_id,
        )

    def notify_activity_update(
        self,
        activity_id: str,
        update_type: str = UPDATE_TYPE_UPDATE,
        reason: str | None = None,
    ) -> OperationResult[int]:
        resolved = self._activity_with_attendees(activity_id)
        if not resolved.ok:
            return OperationResult.failure(resolved.error_kind, resolved.error)
        activity, user_ids = resolved.value
        if not user_ids:
            logger.info("No registered users for activity %s", activity_id)
            return OperationResult.success(0)

        if update_type == UPDATE_TYPE_CANCELLED:
            notification_type = NotificationType.ACTIVITY_CANCELLED
            title = "Etkinlik İptal Edildi"
            message = f"{activity.title} etkinliği iptal edilmiştir."
            if reason:
                message += f" Sebep: {reason}"
        else:
            notification_type = NotificationType.ACTIVITY_UPDATE
            title = "Etkinlik Güncellendi"
            message = f"{activity.title} etkinliğinde güncelleme yapıldı."

        return self._create_for_all(
            user_ids,
            notification_type=notification_type,
            title=title,
            message=message,
            activity_id=activity_id,
        )

    def notify_new_follower(self, user_id: str, follower_id: str) -> OperationResult[int]:
        found = self._get_profile(follower_id, label="follower")
        if not found.ok:
            return OperationResult.failure(found.error_kind, found.error)

        created = self.service.create_notification(
            NotificationData(
                user_id=user_id,
                type=NotificationType.SOCIAL_INTERACTION,
                title="Yeni Takipçi",
                message=f"{found.value.full_name} sizi takip etmeye başladı!",
                related_id=follower_id,
                related_type=RelatedType.USER,
                action_url=f"/profile/{follower_id}",
            )
        )
        if not created.ok:
            return OperationResult.failure(created.error_kind, created.error)
        return OperationResult.success(1)

    def notify_new_comment(
        self, activity_id: str, commenter_id: str, comment: str
    ) -> OperationResult[int]:
        """Tell the activity creator about ``comment``; commenting on your own activity is silent."""

        found = self._get_activity(activity_id)
        if not found.ok:
            return OperationResult.failure(found.error_kind, found.error)
        commenter = self._get_profile(commenter_id, label="commenter")
        if not commenter.ok:
            return OperationResult.failure(commenter.error_kind, commenter.error)

        activity = found.value
        if activity.created_by == commenter_id:
            return OperationResult.success(0)
        if not activity.created_by:
            logger.info("Activity %s has no creator to notify about a comment", activity_id)
            return OperationResult.success(0)

        logger.debug(
            "Notifying %s about a %s character comment on %s",
            activity.created_by,
            len(comment),
            activity_id,
        )
        created = self.service.create_notification(
            NotificationData(
                user_id=activity.created_by,
                type=NotificationType.SOCIAL_INTERACTION,
                title="Yeni Yorum",
                message=f'{commenter.value.full_name} "{activity.title}" etkinliğinize yorum yaptı',
                related_id=activity_id,
                related_type=RelatedType.ACTIVITY,
                action_url=f"{_activity_url(activity_id)}#comments",
            )
        )
        if not created.ok:
            return OperationResult.failure(created.error_kind, created.error)
        return OperationResult.success(1)

    def _create_for_all(
        self,
        user_ids: list[str],
        *,
        notification_type: NotificationType,
        title: str,
        message: str,
        activity_id: str,
    ) -> OperationResult[int]:
        return self.service.create_bulk_notifications(
            [
                NotificationData(
                    user_id=user_id,
                    type=notification_type,
                    title=title,
                    message=message,
                    related_id=activity_id,
                    related_type=RelatedType.ACTIVITY,
                    action_url=_activity_url(activity_id),
                )
                for user_id in user_ids
            ]
        )

    def _get_activity(self, activity_id: str) -> OperationResult[Activity]:
        try:
            activity = self.activities.get(activity_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching activity %s: %s", activity_id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not load activity")
        if activity is None:
            logger.error("Activity %s not found", activity_id)
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Activity not found")
        return OperationResult.success(activity)

    def _activity_with_attendees(
        self, activity_id: str
    ) -> OperationResult[tuple[Activity, list[str]]]:
        found = self._get_activity(activity_id)
        if not found.ok:
            return OperationResult.failure(found.error_kind, found.error)
        try:
            user_ids = _unique(self.activities.list_attendee_ids(activity_id))
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching attendance for activity %s: %s", activity_id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not resolve audience")
        return OperationResult.success((found.value, user_ids))

    def _get_profile(self, user_id: str, *, label: str) -> OperationResult[UserProfile]:
        try:
            profile = self.users.get(user_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching %s %s: %s", label, user_id, exc)
            return OperationResult.failure(ErrorKind.STORE, f"Could not load {label}")
        if profile is None:
            logger.error("%s %s not found", label.capitalize(), user_id)
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"{label.capitalize()} not found")
        return OperationResult.success(profile)


__all__ = [
    "NotificationFanout",
    "UPDATE_TYPE_CANCELLED",
    "UPDATE_TYPE_UPDATE",
]

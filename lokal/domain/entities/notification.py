"""Domain entities describing in-app notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from lokal.utils import ensure_app_timezone


class NotificationType(str, Enum):
    """Closed set of notification kinds."""

    ACTIVITY_REMINDER = "activity_reminder"
    ACTIVITY_REMINDER_24H = "activity_reminder_24h"
    ACTIVITY_REMINDER_1H = "activity_reminder_1h"
    ACTIVITY_UPDATE = "activity_update"
    ACTIVITY_CANCELLED = "activity_cancelled"
    NEW_ACTIVITY = "new_activity"
    SOCIAL_INTERACTION = "social_interaction"
    SYSTEM = "system"


class NotificationCategory(str, Enum):
    """Coarse grouping used by the client filter tabs."""

    ACTIVITY = "activity"
    SOCIAL = "social"
    SYSTEM = "system"


class RelatedType(str, Enum):
    ACTIVITY = "activity"
    GROUP = "group"
    USER = "user"
    COMMENT = "comment"


class NotificationFilter(str, Enum):
    ALL = "all"
    UNREAD = "unread"
    ACTIVITY = "activity"
    SOCIAL = "social"


class NotificationOrdering(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


def category_for_type(notification_type: NotificationType | str) -> NotificationCategory:
    """Return the category implied by ``notification_type``.

    ``activity_*`` types are activity notifications, ``social_interaction`` is
    social and everything else (``new_activity`` included) is system.
    """

    value = NotificationType(notification_type).value
    if value.startswith("activity_"):
        return NotificationCategory.ACTIVITY
    if value == NotificationType.SOCIAL_INTERACTION.value:
        return NotificationCategory.SOCIAL
    return NotificationCategory.SYSTEM


@dataclass
class NotificationData:
    """Construction payload for a single notification."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    related_id: str | None = None
    related_type: RelatedType | None = None
    action_url: str | None = None
    scheduled_for: datetime | None = None


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str | None
    user_id: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    is_read: bool = False
    is_email_sent: bool = False
    related_id: str | None = None
    related_type: RelatedType | None = None
    action_url: str | None = None
    scheduled_for: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_data(cls, data: NotificationData) -> "Notification":
        notification_type = NotificationType(data.type)
        return cls(
            id=None,
            user_id=data.user_id,
            title=data.title,
            message=data.message,
            type=notification_type,
            category=category_for_type(notification_type),
            related_id=data.related_id,
            related_type=RelatedType(data.related_type) if data.related_type else None,
            action_url=data.action_url,
            scheduled_for=ensure_app_timezone(data.scheduled_for),
        )

    def is_scheduled_after(self, moment: datetime) -> bool:
        """Return ``True`` while the notification is deferred past ``moment``."""

        return self.scheduled_for is not None and self.scheduled_for > moment


@dataclass
class NotificationPage:
    """One page of a user's notifications."""

    notifications: list[Notification] = field(default_factory=list)
    count: int = 0
    has_more: bool = False


__all__ = [
    "Notification",
    "NotificationCategory",
    "NotificationData",
    "NotificationFilter",
    "NotificationOrdering",
    "NotificationPage",
    "NotificationType",
    "RelatedType",
    "category_for_type",
]

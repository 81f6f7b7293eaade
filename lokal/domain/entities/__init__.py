"""Domain entities exposed by the application."""

from .activity import Activity, ActivityAttendance, ActivityComment, ActivityStatus
from .email_task import EmailTask, EmailTaskStatus
from .notification import (
    Notification,
    NotificationCategory,
    NotificationData,
    NotificationFilter,
    NotificationOrdering,
    NotificationPage,
    NotificationType,
    RelatedType,
    category_for_type,
)
from .preferences import UserPreferences
from .user import ROLE_ADMIN, ROLE_MEMBER, UserProfile

__all__ = [
    "Activity",
    "ActivityAttendance",
    "ActivityComment",
    "ActivityStatus",
    "EmailTask",
    "EmailTaskStatus",
    "Notification",
    "NotificationCategory",
    "NotificationData",
    "NotificationFilter",
    "NotificationOrdering",
    "NotificationPage",
    "NotificationType",
    "RelatedType",
    "category_for_type",
    "UserPreferences",
    "ROLE_ADMIN",
    "ROLE_MEMBER",
    "UserProfile",
]

"""Repository implementations for infrastructure layer."""

from .activity_repository import ActivityRepository
from .email_outbox_repository import EmailOutboxRepository
from .notification_repository import NotificationRepository
from .preferences_repository import PreferencesRepository
from .user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "EmailOutboxRepository",
    "NotificationRepository",
    "PreferencesRepository",
    "UserRepository",
]

"""Public helpers for creating, delivering and sweeping notifications."""

from .email_dispatch import (
    EmailDispatcher,
    email_allowed,
    render_notification_email,
    should_send_email,
)
from .fanout import UPDATE_TYPE_CANCELLED, UPDATE_TYPE_UPDATE, NotificationFanout
from .outbox import EmailOutbox, backoff_delay
from .preferences import get_preferences, update_preferences
from .service import DEFAULT_PAGE_SIZE, NotificationService
from .sweeper import (
    cleanup_old_notifications,
    process_email_outbox,
    process_scheduled_notifications,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "EmailDispatcher",
    "EmailOutbox",
    "NotificationFanout",
    "NotificationService",
    "UPDATE_TYPE_CANCELLED",
    "UPDATE_TYPE_UPDATE",
    "backoff_delay",
    "cleanup_old_notifications",
    "email_allowed",
    "get_preferences",
    "process_email_outbox",
    "process_scheduled_notifications",
    "render_notification_email",
    "should_send_email",
    "update_preferences",
]

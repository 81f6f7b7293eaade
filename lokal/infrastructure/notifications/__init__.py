"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .publisher import CHANGED_EVENT, NotificationPublisher, notification_publisher

__all__ = [
    "CHANGED_EVENT",
    "NotificationConnectionManager",
    "notification_manager",
    "NotificationPublisher",
    "notification_publisher",
]

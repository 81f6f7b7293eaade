"""Push "notifications changed" signals to websocket subscribers.

Clients react to the signal by re-fetching their notification list; the
payload never carries the notifications themselves.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

from anyio import from_thread

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)

CHANGED_EVENT = "notifications.changed"


class NotificationPublisher:
    """Schedule change signals for the affected users."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def notify_changed(self, user_ids: Iterable[str | None], *, reason: str) -> None:
        """Tell every connected user in ``user_ids`` to re-fetch."""

        seen: set[str] = set()
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            if not self._manager.is_connected(user_id):
                continue
            self._schedule(user_id, {"type": CHANGED_EVENT, "data": {"reason": reason}})

    def _schedule(self, user_id: str, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, user_id, message)
            except RuntimeError:
                # Jobs run from the CLI have no event loop and no sockets to reach.
                logger.debug("No event loop available; skipped push for user %s", user_id)
        else:
            loop.create_task(self._manager.send_to_user(user_id, message))


notification_publisher = NotificationPublisher(notification_manager)


__all__ = ["CHANGED_EVENT", "NotificationPublisher", "notification_publisher"]

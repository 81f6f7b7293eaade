"""Domain entity for queued notification emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EmailTaskStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class EmailTask:
    """Outbox entry asking for one notification to be emailed."""

    id: str | None
    notification_id: str
    user_id: str
    status: EmailTaskStatus = EmailTaskStatus.PENDING
    attempts: int = 0
    next_attempt_at: datetime | None = None
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["EmailTask", "EmailTaskStatus"]

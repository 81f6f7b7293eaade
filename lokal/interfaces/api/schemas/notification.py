"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lokal.domain.entities import (
    NotificationCategory,
    NotificationType,
    RelatedType,
)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    is_read: bool
    is_email_sent: bool
    related_id: str | None = None
    related_type: RelatedType | None = None
    action_url: str | None = None
    scheduled_for: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PaginationRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    has_more: bool = Field(alias="hasMore")


class NotificationListRead(BaseModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountRead(BaseModel):
    count: int


class NotificationIdsRequest(BaseModel):
    """Batch of notification identifiers owned by the caller."""

    model_config = ConfigDict(populate_by_name=True)

    notification_ids: list[str] = Field(alias="notificationIds", min_length=1)

    def unique_ids(self) -> list[str]:
        """Return the identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.notification_ids))


class NotificationUpdateRequest(NotificationIdsRequest):
    action: Literal["read", "unread"] = "read"


class NotificationUpdateRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    updated_count: int = Field(alias="updatedCount")
    action: str


class NotificationDeleteRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(alias="deletedCount")


class NotificationCreate(BaseModel):
    user_id: str = Field(min_length=1)
    type: NotificationType
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    related_id: str | None = None
    related_type: RelatedType | None = None
    action_url: str | None = None
    scheduled_for: datetime | None = None


class JobResultRead(BaseModel):
    job: str
    processed: int


__all__ = [
    "JobResultRead",
    "NotificationCreate",
    "NotificationDeleteRead",
    "NotificationIdsRequest",
    "NotificationListRead",
    "NotificationRead",
    "NotificationUpdateRead",
    "NotificationUpdateRequest",
    "PaginationRead",
    "UnreadCountRead",
]

"""SQLAlchemy model for persisted notifications."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.sql import expression

from lokal.infrastructure.database import Base
from lokal.utils import now_in_app_naive_datetime


def new_uuid() -> str:
    return str(uuid.uuid4())


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(40), nullable=False)
    category = Column(String(20), nullable=False)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_email_sent = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    related_id = Column(String(36), nullable=True)
    related_type = Column(String(20), nullable=True)
    action_url = Column(String(500), nullable=True)
    scheduled_for = Column(DateTime(), nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationModel", "new_uuid"]

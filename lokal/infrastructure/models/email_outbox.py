"""SQLAlchemy model for the notification email outbox."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from lokal.infrastructure.database import Base
from lokal.utils import now_in_app_naive_datetime

from .notification import new_uuid


class EmailOutboxModel(Base):
    """Pending or finished email delivery attempt for a notification."""

    __tablename__ = "email_outbox"

    id = Column(String(36), primary_key=True, default=new_uuid)
    notification_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    attempts = Column(Integer, nullable=False, default=0)
    next_attempt_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["EmailOutboxModel"]

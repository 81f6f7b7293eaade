"""SQLAlchemy models for activities, attendance and comments."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from lokal.infrastructure.database import Base
from lokal.utils import now_in_app_naive_datetime

from .notification import new_uuid


class ActivityModel(Base):
    """Database representation of a café activity."""

    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    activity_type = Column(String(50), nullable=True)
    date_time = Column(DateTime(), nullable=False, index=True)
    duration_hours = Column(Float, nullable=False, default=2)
    location = Column(String(200), nullable=True)
    max_participants = Column(Integer, nullable=True)
    created_by = Column(String(36), nullable=True, index=True)
    managed_by = Column(String(36), nullable=True)
    status = Column(String(20), nullable=False, default="upcoming")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )

    attendance = relationship(
        "ActivityAttendanceModel",
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ActivityAttendanceModel(Base):
    """Registration of a member for an activity."""

    __tablename__ = "activity_attendance"
    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_activity_attendance"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    activity_id = Column(
        String(36), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(36), nullable=False, index=True)
    user_name = Column(String(120), nullable=False)
    attended = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    activity = relationship("ActivityModel", back_populates="attendance")


class ActivityCommentModel(Base):
    __tablename__ = "activity_comments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    activity_id = Column(
        String(36), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ActivityAttendanceModel", "ActivityCommentModel", "ActivityModel"]

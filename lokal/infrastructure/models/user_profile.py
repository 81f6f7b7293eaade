"""SQLAlchemy models for member profiles and their connections."""

from sqlalchemy import Column, DateTime, String, UniqueConstraint, func

from lokal.infrastructure.database import Base
from lokal.utils import now_in_app_naive_datetime

from .notification import new_uuid


class UserProfileModel(Base):
    """Database representation of a community member."""

    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="member")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


class UserConnectionModel(Base):
    """Follow relationship between two members."""

    __tablename__ = "user_connections"
    __table_args__ = (
        UniqueConstraint("user_id", "connected_user_id", name="uq_user_connection"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    connected_user_id = Column(String(36), nullable=False, index=True)
    connection_type = Column(String(20), nullable=False, default="follow")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["UserConnectionModel", "UserProfileModel"]

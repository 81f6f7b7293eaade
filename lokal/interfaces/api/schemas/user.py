"""Schemas for member interactions."""

from pydantic import BaseModel


class FollowRead(BaseModel):
    user_id: str
    following: bool
    created: bool


__all__ = ["FollowRead"]

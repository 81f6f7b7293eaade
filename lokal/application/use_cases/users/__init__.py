"""Use cases for member interactions."""

from .follow_user import follow_user

__all__ = ["follow_user"]

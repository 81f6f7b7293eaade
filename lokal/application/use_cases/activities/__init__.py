"""Use cases for managing café activities."""

from .attendance import LEAVE_CUTOFF, join_activity, leave_activity
from .comments import add_comment
from .common import ActivityNotFoundError, get_activity
from .create_activity import create_activity
from .update_activity import NOTIFIABLE_FIELDS, cancel_activity, update_activity

__all__ = [
    "ActivityNotFoundError",
    "LEAVE_CUTOFF",
    "NOTIFIABLE_FIELDS",
    "add_comment",
    "cancel_activity",
    "create_activity",
    "get_activity",
    "join_activity",
    "leave_activity",
    "update_activity",
]

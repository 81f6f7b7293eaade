"""ORM models used by the application infrastructure."""

from .activity import ActivityAttendanceModel, ActivityCommentModel, ActivityModel
from .email_outbox import EmailOutboxModel
from .notification import NotificationModel
from .user_preferences import UserPreferencesModel
from .user_profile import UserConnectionModel, UserProfileModel

__all__ = [
    "ActivityAttendanceModel",
    "ActivityCommentModel",
    "ActivityModel",
    "EmailOutboxModel",
    "NotificationModel",
    "UserConnectionModel",
    "UserPreferencesModel",
    "UserProfileModel",
]

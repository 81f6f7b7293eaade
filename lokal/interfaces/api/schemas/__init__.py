from .activity import (
    ActivityCancel,
    ActivityCreate,
    ActivityRead,
    ActivityUpdate,
    AttendanceRead,
    CommentCreate,
    CommentRead,
    ReminderRead,
)
from .common import ApiResponse
from .email import EmailSendRead, EmailSendRequest
from .notification import (
    JobResultRead,
    NotificationCreate,
    NotificationDeleteRead,
    NotificationIdsRequest,
    NotificationListRead,
    NotificationRead,
    NotificationUpdateRead,
    NotificationUpdateRequest,
    PaginationRead,
    UnreadCountRead,
)
from .preferences import PreferencesRead, PreferencesUpdate
from .user import FollowRead

__all__ = [
    "ActivityCancel",
    "ActivityCreate",
    "ActivityRead",
    "ActivityUpdate",
    "ApiResponse",
    "AttendanceRead",
    "CommentCreate",
    "CommentRead",
    "EmailSendRead",
    "EmailSendRequest",
    "FollowRead",
    "JobResultRead",
    "NotificationCreate",
    "NotificationDeleteRead",
    "NotificationIdsRequest",
    "NotificationListRead",
    "NotificationRead",
    "NotificationUpdateRead",
    "NotificationUpdateRequest",
    "PaginationRead",
    "PreferencesRead",
    "PreferencesUpdate",
    "ReminderRead",
    "UnreadCountRead",
]

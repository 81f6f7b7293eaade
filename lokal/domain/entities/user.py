"""Domain entity representing a member profile."""

from dataclasses import dataclass
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


@dataclass
class UserProfile:
    """Core attributes describing a community member."""

    user_id: str
    full_name: str
    email: str | None
    role: str = ROLE_MEMBER
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_admin(self) -> bool:
        """Return ``True`` when the member is an administrator."""

        return self.role.lower() == ROLE_ADMIN

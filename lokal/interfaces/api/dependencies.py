"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import NotificationFanout, NotificationService
from lokal.domain.entities import UserProfile
from lokal.infrastructure.database import get_db
from lokal.infrastructure.email_api import EmailApiClient, EmailClient
from lokal.infrastructure.repositories import UserRepository
from lokal.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> UserProfile:
    """Resolve the member profile for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _unauthorized()

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("User profile not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserProfile:
    """Return the authenticated member from the bearer token."""

    return resolve_current_user(token, db)


def require_admin(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
    """Ensure the authenticated member has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Admin access required.",
        )
    return current_user


def get_email_client() -> EmailClient:
    """Return the client used to hand notification emails to the email sink."""

    return EmailApiClient()


def get_notification_service(
    db: Session = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
) -> NotificationService:
    return NotificationService(db, email_client=email_client)


def get_notification_fanout(
    service: NotificationService = Depends(get_notification_service),
) -> NotificationFanout:
    return NotificationFanout(service)


__all__ = [
    "get_current_user",
    "get_email_client",
    "get_notification_fanout",
    "get_notification_service",
    "oauth2_scheme",
    "require_admin",
    "resolve_current_user",
]

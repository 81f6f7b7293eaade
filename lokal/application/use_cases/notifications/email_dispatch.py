"""Preference-gated email delivery for notifications."""

from __future__ import annotations

import logging
from html import escape

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lokal.config import Settings, get_settings
from lokal.domain.entities import Notification, NotificationType, UserPreferences
from lokal.domain.results import ErrorKind, OperationResult
from lokal.infrastructure.email_api import EmailClient
from lokal.infrastructure.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)

_PREFERENCE_FOR_TYPE: dict[NotificationType, str] = {
    NotificationType.ACTIVITY_REMINDER_24H: "activity_reminders_24h",
    NotificationType.ACTIVITY_REMINDER_1H: "activity_reminders_1h",
    NotificationType.ACTIVITY_UPDATE: "activity_updates",
    NotificationType.ACTIVITY_CANCELLED: "activity_updates",
    NotificationType.NEW_ACTIVITY: "new_activities",
    NotificationType.SOCIAL_INTERACTION: "social_notifications",
}


def should_send_email(
    notification_type: NotificationType | str, preferences: UserPreferences
) -> bool:
    """Return whether ``preferences`` opt in to emails for ``notification_type``.

    Types without a matching toggle (``system``, the generic
    ``activity_reminder``) never email.
    """

    try:
        key = _PREFERENCE_FOR_TYPE.get(NotificationType(notification_type))
    except ValueError:
        return False
    if key is None:
        return False
    return bool(getattr(preferences, key))


def email_allowed(notification: Notification, preferences: UserPreferences | None) -> bool:
    """Combine the channel toggle with the per-type toggle."""

    if preferences is None:
        return False
    return preferences.email_notifications and should_send_email(
        notification.type, preferences
    )


def render_notification_email(notification: Notification, base_url: str) -> str:
    """Return the HTML body sent for ``notification``."""

    parts = [
        "<div>",
        f"<h1>{escape(notification.title)}</h1>",
        f"<p>{escape(notification.message)}</p>",
    ]
    if notification.action_url:
        link = f"{base_url.rstrip('/')}{notification.action_url}"
        parts.append(f'<p><a href="{escape(link, quote=True)}">View Details</a></p>')
    parts.append(
        "<p><small>You are receiving this because your notification preferences "
        "are enabled.</small></p>"
    )
    parts.append("</div>")
    return "".join(parts)


class EmailDispatcher:
    """Resolve the recipient, send through ``email_client`` and flag the row."""

    def __init__(
        self,
        session: Session,
        email_client: EmailClient,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.email_client = email_client
        self.settings = settings or get_settings()

    def send_email_notification(
        self, user_id: str, notification: Notification
    ) -> OperationResult[bool]:
        try:
            profile = UserRepository(self.session).get(user_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching email address for user %s: %s", user_id, exc)
            return OperationResult.failure(ErrorKind.STORE, "Could not load user profile")

        if profile is None or not profile.email:
            logger.error("User %s has no email address; notification email skipped", user_id)
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Email address missing")

        html = render_notification_email(notification, self.settings.base_url)
        try:
            delivery = self.email_client.send(
                to=profile.email, subject=notification.title, html=html
            )
        except Exception as exc:  # noqa: BLE001 - delivery must never break callers
            logger.exception("Unexpected error sending notification %s: %s", notification.id, exc)
            return OperationResult.failure(ErrorKind.DELIVERY, str(exc))

        if not delivery.delivered:
            logger.error(
                "Failed to send email for notification %s: %s",
                notification.id,
                delivery.detail,
            )
            return OperationResult.failure(
                ErrorKind.DELIVERY, delivery.detail or "Email delivery failed"
            )

        try:
            NotificationRepository(self.session).mark_email_sent(notification.id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(
                "Email sent but notification %s could not be flagged: %s",
                notification.id,
                exc,
            )
            return OperationResult.failure(ErrorKind.STORE, "Could not flag notification")

        notification.is_email_sent = True
        logger.info("Email notification sent successfully to %s", profile.email)
        return OperationResult.success(True)


__all__ = [
    "EmailDispatcher",
    "email_allowed",
    "render_notification_email",
    "should_send_email",
]

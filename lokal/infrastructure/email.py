"""Utility helpers for sending transactional emails via SendGrid."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from lokal.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailDeliveryResult:
    """Outcome of a provider call, with a short reason when it failed."""

    delivered: bool
    status_code: int | None = None
    detail: str | None = None


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def send_email(subject: str, html_content: str, recipient: str) -> EmailDeliveryResult:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.warning("SendGrid configuration incomplete; skipping email delivery")
        return EmailDeliveryResult(delivered=False, detail="Email provider is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # noqa: BLE001 - the SDK raises plain HTTP errors
        status_code = getattr(exc, "status_code", None)
        details = _extract_sendgrid_error_details(getattr(exc, "body", None))
        if status_code or details:
            logger.error(
                "SendGrid API request failed with status %s: %s", status_code, details
            )
        else:
            logger.exception("Error sending email via SendGrid: %s", exc)
        return EmailDeliveryResult(
            delivered=False, status_code=status_code, detail=details or str(exc)
        )

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        logger.error("SendGrid API responded with status %s: %s", status_code, details)
        return EmailDeliveryResult(delivered=False, status_code=status_code, detail=details)

    return EmailDeliveryResult(delivered=True, status_code=status_code)


__all__ = ["EmailDeliveryResult", "send_email"]

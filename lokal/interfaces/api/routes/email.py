"""Internal email sink used by the notification email adapter."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from lokal.config import get_settings
from lokal.infrastructure import email as email_provider
from lokal.interfaces.api.schemas import ApiResponse, EmailSendRead, EmailSendRequest

router = APIRouter(tags=["email"])
logger = logging.getLogger(__name__)


@router.post("/send-email", response_model=ApiResponse[EmailSendRead])
def send_email(payload: EmailSendRequest):
    """Deliver one HTML email through SendGrid."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Email service is not configured",
        )

    result = email_provider.send_email(payload.subject, payload.html, str(payload.to))
    if not result.delivered:
        logger.warning("Email to %s was not delivered: %s", payload.to, result.detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send email",
        )
    return ApiResponse(
        data=EmailSendRead(message="Email sent successfully", status_code=result.status_code)
    )

"""HTTP client for the internal send-email endpoint."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from lokal.config import Settings, get_settings

from .email import EmailDeliveryResult

logger = logging.getLogger(__name__)


class EmailClient(Protocol):
    """Anything able to deliver ``{to, subject, html}``."""

    def send(self, *, to: str, subject: str, html: str) -> EmailDeliveryResult: ...


def _response_detail(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)


class EmailApiClient:
    """POST emails to ``BASE_URL + SEND_EMAIL_PATH``."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self._settings.send_email_url

    def send(self, *, to: str, subject: str, html: str) -> EmailDeliveryResult:
        payload = {"to": to, "subject": subject, "html": html}
        try:
            with httpx.Client(
                timeout=self._settings.email_timeout_seconds, transport=self._transport
            ) as client:
                response = client.post(self.endpoint, json=payload)
        except httpx.RequestError as exc:
            logger.error("Send-email endpoint %s unreachable: %s", self.endpoint, exc)
            return EmailDeliveryResult(delivered=False, detail=str(exc))

        if response.is_success:
            return EmailDeliveryResult(delivered=True, status_code=response.status_code)

        detail = _response_detail(response)
        logger.error(
            "Send-email endpoint responded with status %s: %s",
            response.status_code,
            detail,
        )
        return EmailDeliveryResult(
            delivered=False, status_code=response.status_code, detail=detail
        )


__all__ = ["EmailApiClient", "EmailClient"]

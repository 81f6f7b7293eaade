"""Unit tests for the SendGrid helper and the send-email API client."""

from __future__ import annotations

import json
import types

import httpx
import pytest

from lokal.config import Settings
from lokal.infrastructure import email as email_module
from lokal.infrastructure.email_api import EmailApiClient


class _StubSendGridAPIClient:
    """Default stub client that returns a successful response."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        return types.SimpleNamespace(status_code=202, body=None)


class DummySettings:
    sendgrid_api_key = "SG.fake"
    sendgrid_sender = "kafe@lokal.example"


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """When SendGrid settings are missing the helper should exit early."""

    class MissingSettings:
        sendgrid_api_key = None
        sendgrid_sender = None

    monkeypatch.setattr(email_module, "get_settings", lambda: MissingSettings())

    result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result.delivered is False
    assert result.detail == "Email provider is not configured"


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """A successful SendGrid response is reported as delivered."""

    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridAPIClient)

    result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result.delivered is True
    assert result.status_code == 202


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog):
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(_StubSendGridAPIClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result.delivered is False
    assert result.status_code == 403
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_settings_require_sendgrid_pair() -> None:
    with pytest.raises(ValueError):
        Settings(sendgrid_api_key="SG.fake", sendgrid_sender=None)


def _client(handler) -> EmailApiClient:
    settings = Settings(base_url="http://lokal.test/", send_email_path="/send-email")
    return EmailApiClient(settings, transport=httpx.MockTransport(handler))


def test_email_api_client_posts_payload() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    result = _client(handler).send(to="u1@example.com", subject="Yeni Yorum", html="<p>x</p>")

    assert result.delivered is True
    assert captured["url"] == "http://lokal.test/send-email"
    assert captured["body"] == {
        "to": "u1@example.com",
        "subject": "Yeni Yorum",
        "html": "<p>x</p>",
    }


def test_email_api_client_reports_error_status(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False, "error": "Failed to send email"})

    with caplog.at_level("ERROR"):
        result = _client(handler).send(to="u1@example.com", subject="s", html="h")

    assert result.delivered is False
    assert result.status_code == 500
    assert result.detail == "Failed to send email"
    assert "status 500" in caplog.text


def test_email_api_client_handles_unreachable_sink() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _client(handler).send(to="u1@example.com", subject="s", html="h")

    assert result.delivered is False
    assert "connection refused" in result.detail

"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./lokal.db",
        description="Database connection URL used by SQLAlchemy",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me", description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL used for absolute links and the send-email endpoint",
        min_length=1,
    )
    send_email_path: str = Field(
        default="/send-email",
        description="Path of the internal endpoint that relays emails to the provider",
    )
    email_timeout_seconds: float = Field(default=10.0, gt=0)
    email_dispatch_inline: bool = Field(
        default=True,
        description="Attempt outbox delivery right after a notification is created",
    )
    email_outbox_max_attempts: int = Field(default=5, gt=0)
    email_outbox_backoff_seconds: int = Field(default=60, gt=0)
    email_outbox_max_backoff_seconds: int = Field(default=3600, gt=0)
    notification_retention_days: int = Field(default=30, gt=0)
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    app_timezone: str = Field(default="Europe/Istanbul")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def send_email_url(self) -> str:
        """Absolute URL of the endpoint that relays emails."""

        return f"{self.base_url.rstrip('/')}/{self.send_email_path.lstrip('/')}"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    n8n_webhook_url: str | None = None
    n8n_notification_webhook_url: str | None = None
    webhook_timeout_seconds: float = 10.0
    notification_queue_size: int = 1000
    expiry_email_recipients: str | None = None
    week_start_day: int = 0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_recipients(raw: str | None) -> list[str]:
    """Parse extra email recipients from env."""
    if raw is None:
        return []
    recipients: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and "@" in value and value not in recipients:
            recipients.append(value)
    return recipients

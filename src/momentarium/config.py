"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "images"
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "medium"
    openai_store: bool = False
    qstash_url: str = "https://qstash.upstash.io"
    qstash_token: str
    qstash_current_signing_key: str | None = None
    qstash_next_signing_key: str | None = None
    verify_queue_signature: bool = False
    app_url: str = "http://localhost:8000"
    api_secret_key: str
    max_batch_size: int = 50
    queue_retries: int = 3
    read_url_expiry_seconds: int = 3600
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def callback_url(self) -> str:
        """Absolute URL the queue delivers job callbacks to."""
        return f"{self.app_url.rstrip('/')}/jobs/process"

    def signing_keys(self) -> list[str]:
        """Return the configured queue signing keys, current first."""
        return [
            key
            for key in (self.qstash_current_signing_key, self.qstash_next_signing_key)
            if key
        ]

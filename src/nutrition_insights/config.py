"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_timeout_seconds: float = 30.0
    profile_cache_ttl_seconds: int = 300
    profile_cache_max_entries: int = 1024
    chat_requests_per_minute: int = 10
    chat_requests_per_day: int = 50
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def ai_enabled(self) -> bool:
        """Return True when an OpenAI key is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())

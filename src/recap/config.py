"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.recap.errors import ConfigurationError


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ALLOWED_ORIGINS: str = "*"

    # Conversation service (credential + assistant template)
    OPENAI_API_KEY: str = ""
    OPENAI_ASSISTANT_ID: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_TIMEOUT: float = 30.0

    # Run polling
    RUN_POLL_INTERVAL_SECONDS: float = 1.0
    RUN_POLL_TIMEOUT_SECONDS: float = 120.0

    # Speech synthesis
    TTS_MODEL: str = "gpt-4o-mini-tts"
    TTS_VOICE: str = "alloy"

    # Monitoring
    SENTRY_DSN: str = ""

    # Client side
    RECAP_API_URL: str = "http://localhost:8000"
    RECAP_CLIENT_STORAGE_PATH: str = "~/.meeting_recap/local_storage.json"

    @property
    def remote_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY and self.OPENAI_ASSISTANT_ID)

    def require_remote_credentials(self) -> None:
        """Fail fast when the conversation service cannot be reached.

        Checked before every recap request so that a missing secret surfaces
        as a ConfigurationError instead of an opaque upstream 401.

        Raises:
            ConfigurationError: Naming the first missing variable.
        """
        if not self.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        if not self.OPENAI_ASSISTANT_ID:
            raise ConfigurationError("OPENAI_ASSISTANT_ID is not set")


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()

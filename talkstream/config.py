from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend
    TALKSTREAM_BACKEND_URL: str = "http://localhost:8080"
    REQUEST_TIMEOUT: float = 30.0
    STREAM_TIMEOUT: float = Field(default=300.0, description="Read timeout between streamed chunks, seconds")

    # Speech
    TTS_VOICE: str = "alloy"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")

    @property
    def backend_url(self) -> str:
        """Backend base URL without trailing slash."""
        return self.TALKSTREAM_BACKEND_URL.rstrip("/")


def get_settings() -> Settings:
    return Settings()

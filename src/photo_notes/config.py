"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    package_name: str
    platform_api_key: str
    elevenlabs_api_key: str
    notion_api_secret: str
    notion_page_id: str
    port: int = 3000
    base_url: str | None = None
    platform_api_url: str = "https://api.mentra.glass"
    audio_dir: str = "temp_audio"
    audio_max_age_minutes: int = 30
    audio_cleanup_interval_seconds: int = 600
    streaming_interval_seconds: float = 2.0
    streaming_fallback_seconds: float = 30.0
    activation_words: str = "hey glasses,hello glasses"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def public_base_url(self) -> str:
        """Base URL the headset uses to fetch generated audio."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"http://localhost:{self.port}"


def parse_phrase_list(raw: str | None) -> tuple[str, ...]:
    """Parse a comma-separated phrase list from env."""
    if raw is None:
        return ()
    phrases: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value:
            phrases.append(value)
    return tuple(phrases)

"""
config.py — Runtime settings, read from the environment (or a .env file).

All settings use the YTFLOW_ prefix except the OpenAI credential, which keeps
the name the OpenAI tooling already uses.  Leaving OPENAI_API_KEY unset is a
supported mode: transcription then runs on YouTube captions only.
"""

from __future__ import annotations

import tempfile
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Transcription
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "YTFLOW_OPENAI_API_KEY"),
    )
    whisper_model: str = "whisper-1"
    max_transcribe_seconds: int = 1800

    # Media extraction (yt-dlp).  Switch off to serve lookups only.
    extraction_enabled: bool = True

    # Fallback targets
    fallback_downloader_url: str = "https://cobalt.tools/#u={url}"
    noembed_url: str = "https://noembed.com/embed"
    http_timeout: float = 10.0

    # Scratch space for audio and media downloads
    temp_dir: str = Field(default_factory=tempfile.gettempdir)

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="YTFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def whisper_enabled(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()

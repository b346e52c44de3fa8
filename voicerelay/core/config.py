"""
Application configuration via pydantic-settings.

Loads values from the environment or a ``.env`` file. The relay and the
recorder client each have their own settings class so that the recorder
never needs the upstream credential.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 25 * 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = (
    "audio/webm",
    "audio/mp3",
    "audio/mpeg",
    "audio/mp4",
    "audio/wav",
    "audio/ogg",
    "audio/m4a",
    "audio/x-m4a",
)

LOCAL_DEV_ORIGIN = "http://localhost:3000"


class Settings(BaseSettings):
    """Relay settings, built once at process start and never mutated.

    Field names map directly to env var names (case-insensitive).

    Attributes:
        openai_api_key: Bearer credential for the upstream service. Required;
            constructing ``Settings`` without it raises ``ValidationError``.
        frontend_url: Production origin added to the CORS allow-list.
        max_upload_bytes: Upper bound for the uploaded audio field.
        upload_dir: Directory for temporary upload artifacts (None = system temp).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # --- Upstream transcription service ---
    openai_api_key: str = Field(min_length=1)
    openai_base_url: str = "https://api.openai.com/v1"
    transcription_provider: str = "openai"
    transcription_model: str = "whisper-1"
    transcription_timeout: float | None = None  # None = wait as long as upstream takes

    # --- HTTP server ---
    app_host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = ""  # Production frontend origin, e.g. https://app.example.com
    log_level: str = "INFO"

    # --- Upload validation ---
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    allowed_mime_types: tuple[str, ...] = DEFAULT_ALLOWED_MIME_TYPES
    upload_dir: Path | None = None

    @property
    def cors_origins(self) -> list[str]:
        """Explicit CORS allow-list: local dev origin plus the configured frontend."""
        return [origin for origin in (LOCAL_DEV_ORIGIN, self.frontend_url) if origin]

    @property
    def transcription_url(self) -> str:
        return f"{self.openai_base_url.rstrip('/')}/audio/transcriptions"


class RecorderSettings(BaseSettings):
    """Recorder client settings (env prefix ``RECORDER_``)."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    api_url: str = "http://localhost:5000"
    chunk_interval: float = 1.0  # Seconds of audio per captured chunk
    sample_rate: int = 16000
    channels: int = 1
    audio_format: str = "ogg"  # "ogg" (Vorbis) or "wav"
    request_timeout: float = 120.0


@lru_cache
def get_settings() -> Settings:
    """Return the cached relay Settings singleton.

    Raises:
        pydantic.ValidationError: If ``OPENAI_API_KEY`` is not configured.
    """
    return Settings()


@lru_cache
def get_recorder_settings() -> RecorderSettings:
    """Return the cached recorder Settings singleton."""
    return RecorderSettings()

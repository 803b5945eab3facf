"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import ChunkSizeBytes, MaxQueueSize

DEFAULT_FORMAT_FILTER = "ba[abr>0][vcodec=none]/best"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class ExtractorSettings(BaseModel):
    """External extractor invocation."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    program: str = Field(
        default="yt-dlp",
        min_length=1,
        validation_alias=AliasChoices("program", "ytdlp_program", "ytdl_command"),
    )
    format_filter: str = Field(
        default=DEFAULT_FORMAT_FILTER,
        min_length=1,
        validation_alias=AliasChoices("format_filter", "ytdlp_format", "format"),
    )
    user_args: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("user_args", mode="before")
    @classmethod
    def validate_user_args(cls, v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
        """Accept a list from JSON env values or a whitespace-separated string."""
        if isinstance(v, str):
            return tuple(v.split())
        if isinstance(v, list):
            return tuple(v)
        return v


class HttpSettings(BaseModel):
    """Shared HTTP client configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    timeout_s: float = Field(
        default=15.0, gt=0.0, le=300.0, validation_alias=AliasChoices("timeout_s", "timeout")
    )
    connect_timeout_s: float = Field(default=5.0, gt=0.0, le=60.0)
    chunk_size: ChunkSizeBytes = 64 * 1024
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    max_connections: int = Field(default=20, ge=1, le=500)


class SearchApiSettings(BaseModel):
    """Fast-path metadata search (YouTube Data API v3)."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("api_key", "yt_api_key", "youtube_api_key"),
    )
    base_url: str = Field(default="https://www.googleapis.com/youtube/v3")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(ErrorMessages.INVALID_BASE_URL)
        return v.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key.get_secret_value())


class PlaybackSettings(BaseModel):
    """Queue boundary configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    metadata_timeout_s: float = Field(default=1.0, gt=0.0, le=60.0)
    max_queue_size: MaxQueueSize = 200


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - EXTRACTOR__PROGRAM, EXTRACTOR__FORMAT_FILTER, etc. (nested with prefix)
    - SEARCH_API__API_KEY, SEARCH_API__BASE_URL
    - HTTP__TIMEOUT_S, PLAYBACK__METADATA_TIMEOUT_S
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    extractor: ExtractorSettings = Field(default_factory=ExtractorSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    search_api: SearchApiSettings = Field(default_factory=SearchApiSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

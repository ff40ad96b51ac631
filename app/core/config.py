"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class SearchSettings(BaseSettings):
    """Upstream search service configuration.

    The page size must match what the upstream actually returns per page:
    the cache derives the next page number from the number of buffered items.
    """

    provider: str = Field(
        "scryfall",
        description="Upstream search provider name",
    )
    base_url: str = Field(
        "https://api.scryfall.com",
        description="Base URL of the upstream search API",
    )
    user_agent: str = Field(
        "CardSearchPager/0.1.0",
        description="User-Agent header sent with every upstream request",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Upstream request timeout in seconds",
        gt=0,
    )
    page_size: int = Field(
        175,
        description="Number of results per upstream page",
        ge=1,
    )
    min_interval_ms: int = Field(
        100,
        description="Minimum spacing between two upstream requests, in milliseconds",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        case_sensitive=False,
    )


class CacheSettings(BaseSettings):
    """Pagination cache configuration."""

    ttl_seconds: float = Field(
        300.0,
        description="Lifetime of a cached result buffer, measured from its creation",
        gt=0,
    )
    max_entries: int | None = Field(
        None,
        description="Maximum number of cached (query, order) buffers (None for unlimited)",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    default_limit: int = Field(
        20,
        description="Results per page when the client does not ask for a limit",
        ge=1,
    )
    max_limit: int = Field(
        175,
        description="Upper bound applied to the client-requested limit",
        ge=1,
    )
    default_order: str = Field(
        "name",
        description="Sort order used when the client does not provide one",
    )
    default_format: str = Field(
        "commander",
        description="Format legality filter appended to queries ('all' disables it)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int | None = Field(
        10_000_000,
        description="Rotate the log file after this many bytes (None disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read/propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()

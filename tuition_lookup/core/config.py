"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

The Google Sheets credentials are deliberately optional at startup: a missing
value is reported per request as a configuration error (HTTP 500) instead of
preventing the process from booting.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

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


class LogSettings(BaseSettings):
    """Logging configuration consumed by ``configure_logging``."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format: structured JSON or plain text",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where to write logs",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        5 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(3, description="Number of rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and echo the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class SheetsSettings(BaseSettings):
    """Google Sheets data source configuration.

    The three identifiers use the plain variable names operators already know
    (``GOOGLE_SHEETS_API_KEY``, ``GOOGLE_SHEET_ID``, ``SHEET_NAME``); tuning
    knobs use the ``SHEETS_`` prefix.
    """

    api_key: str | None = Field(
        None,
        validation_alias="GOOGLE_SHEETS_API_KEY",
        description="Google API key with read access to the spreadsheet",
    )
    sheet_id: str | None = Field(
        None,
        validation_alias="GOOGLE_SHEET_ID",
        description="Spreadsheet identifier (the long id in the sheet URL)",
    )
    sheet_name: str | None = Field(
        None,
        validation_alias="SHEET_NAME",
        description="Tab name holding the tuition table",
    )
    base_url: str = Field(
        "https://sheets.googleapis.com/v4",
        description="Sheets API base URL",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Upper bound for the values request, in seconds",
        gt=0,
    )
    cache_ttl_seconds: int = Field(
        60,
        description="How long a fetched grid is reused before re-fetching",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="SHEETS_",
        case_sensitive=False,
        populate_by_name=True,
    )

    def missing_fields(self) -> list[str]:
        """Return the names of required identifiers that are not set."""

        required = {
            "GOOGLE_SHEETS_API_KEY": self.api_key,
            "GOOGLE_SHEET_ID": self.sheet_id,
            "SHEET_NAME": self.sheet_name,
        }
        return [name for name, value in required.items() if not value]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the lookup endpoint",
    )
    rate_limit_requests: int = Field(
        10,
        description="Maximum number of lookups allowed per window (per client)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    rate_limit_max_keys: int = Field(
        10_000,
        description="Prune expired client entries once the table grows past this size",
        ge=1,
    )
    trust_forwarded_for: bool = Field(
        True,
        description="Identify clients by the first X-Forwarded-For entry (behind a proxy)",
    )

    max_input_chars: int = Field(
        100,
        description="Maximum length kept from each search field after sanitizing",
        ge=1,
    )
    max_results: int = Field(
        5,
        description="Maximum number of matching rows returned per lookup",
        ge=1,
    )
    sheet_schema: Literal["v1", "v2"] = Field(
        "v2",
        description="Column layout of the tuition sheet (v1 includes the parent's phone)",
    )
    match_ignore_diacritics: bool = Field(
        True,
        description="Compare names without Vietnamese tone marks (Nguyen == Nguyễn)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


def _build_log_settings() -> LogSettings:
    return LogSettings()  # type: ignore[call-arg]


def _build_sheets_settings() -> SheetsSettings:
    return SheetsSettings()  # type: ignore[call-arg]


def _build_app_settings() -> AppSettings:
    return AppSettings()  # type: ignore[call-arg]


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a provided value is malformed.
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    sheets: SheetsSettings = Field(default_factory=_build_sheets_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()

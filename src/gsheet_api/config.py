"""Client configuration using pydantic-settings.

Values come from constructor arguments, ``GSHEET_*`` environment variables
or a ``.env`` file, in that order of precedence.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SPREADSHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Settings for the Sheets client.

    Environment variables:
    - GSHEET_API_BASE_URL: Sheets API endpoint
    - GSHEET_TIMEOUT: HTTP timeout in seconds
    - GSHEET_SERVICE_ACCOUNT_PATH (or SERVICE_ACCOUNT_PATH): key file path
    - GSHEET_LOG_LEVEL, GSHEET_LOG_JSON: logging output
    """

    model_config = SettingsConfigDict(
        env_prefix="GSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = 60.0

    service_account_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "GSHEET_SERVICE_ACCOUNT_PATH",
            "SERVICE_ACCOUNT_PATH",
            "service_account_path",
        ),
    )
    scopes: list[str] = [SPREADSHEETS_SCOPE]

    # Refresh tokens this many seconds before they actually expire
    token_refresh_buffer: int = 10

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("token_refresh_buffer")
    @classmethod
    def validate_refresh_buffer(cls, v: int) -> int:
        if v < 0:
            raise ValueError("token_refresh_buffer must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        return v_upper


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

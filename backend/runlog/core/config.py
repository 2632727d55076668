"""Application configuration settings."""

import logging
from datetime import date
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "runlog"
    app_version: str = "0.1.0"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/runlog.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"

    # Reporting
    timezone: str = "UTC"  # IANA name used for "now" and date labels
    history_anchor_date: date = date(1990, 12, 25)
    default_window_weeks: int = 52

    # Mock data
    mock_weeks: int = 8


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    if settings.debug:
        logger.debug("Loaded settings: %s", settings.model_dump())
    return settings

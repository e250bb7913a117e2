"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Riyadh",
        description="IANA timezone (or UTC+HH:MM offset) used to decide what 'today' is",
    )
    residence_scheduler_enabled: bool = Field(
        default=True,
        description="Start the residence expiry scheduler together with the API",
    )
    residence_check_interval_hours: float = Field(
        default=24,
        description="Hours between two residence expiry sweeps",
        gt=0,
    )
    residence_dedupe_notifications: bool = Field(
        default=True,
        description=(
            "Skip tiers already recorded in the residence notification audit table "
            "(once per expiry date, once per day for the daily tier)"
        ),
    )
    notification_language: Literal["ar", "en"] = Field(
        default="ar",
        description="Language used for residence notification titles and bodies",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser (JSON list)",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

_KNOWN_ROLES = {"owner", "manager", "employee", "customer"}


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy for the record store",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Asia/Baghdad",
        description="IANA timezone (or UTC+HH:MM offset) used for timestamps",
    )
    enable_trigger_scheduler: bool = Field(
        default=True,
        description="Start the APScheduler trigger facility for reminders and alerts",
    )
    alert_sound_uri: str | None = Field(
        default="https://assets.mixkit.co/active_storage/sfx/2869/2869-preview.mp3",
        description="Sound clients play when a new notification arrives",
    )
    alert_volume: float = Field(default=0.7, ge=0.0, le=1.0)
    reminder_recipient_role: str = Field(
        default="manager",
        description="Role whose connected clients receive fired debt reminders",
    )
    default_upcoming_days: int = Field(
        default=30,
        description="Window used when listing upcoming reminders without an explicit value",
        gt=0,
    )
    log_level: str = Field(default="INFO")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("reminder_recipient_role")
    @classmethod
    def _validate_reminder_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _KNOWN_ROLES:
            raise ValueError(
                "REMINDER_RECIPIENT_ROLE must be one of: " + ", ".join(sorted(_KNOWN_ROLES))
            )
        return normalized

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

"""Reminder scheduler settings."""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReminderSettings(BaseSettings):
    """Periodic reminder evaluation settings.

    Environment variables use REMINDER_ prefix.
    Example: REMINDER_INTERVAL_SECONDS=60, REMINDER_TIMEZONE=Europe/Madrid
    """

    enabled: bool = Field(
        default=True,
        description="Run the periodic reminder scheduler inside the API process.",
    )
    interval_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=3600.0,
        description="Seconds between reminder cycles.",
    )
    imminent_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Look-ahead window (minutes) for imminent reminders.",
    )
    overdue_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Look-back window (minutes) for recently overdue events.",
    )
    timezone: str = Field(
        default="UTC",
        description="IANA time zone that defines the current calendar day.",
    )

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown time zone: {value}"
            raise ValueError(msg) from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

"""Modular Pydantic Settings v2 configuration.

One frozen settings model per domain (app/db/logging/reminders), read from
environment variables with an optional ``.env`` file, and exposed through
LRU-cached loaders:

    from agenda_service.core.settings import get_db_settings

    settings = get_db_settings()
    print(settings.host, settings.connect_timeout)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_reminder_settings,
)
from .logs import LoggingSettings
from .reminders import ReminderSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "ReminderSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_reminder_settings",
]

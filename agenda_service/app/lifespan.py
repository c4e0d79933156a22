"""Application lifespan management.

Startup Order:
1. Logging
2. Database (bootstrapper with bounded retries; degraded when optional)
3. Reminder scheduler (only with a ready gateway)

Shutdown Order: Reverse of startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from agenda_service.core.settings import (
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_reminder_settings,
)
from agenda_service.features.reminders import ReminderScheduler
from agenda_service.infra.database import StorageConnectionError, StorageGateway, establish
from agenda_service.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def startup_database(app: FastAPI) -> StorageGateway | None:
    """Establish the storage gateway.

    Returns None when the database is unreachable and not required.

    Raises:
        StorageConnectionError: If the database is required and unreachable.
    """
    db_settings = get_db_settings()
    try:
        gateway = await establish(db_settings)
    except StorageConnectionError as e:
        if db_settings.startup_require_db:
            logger.exception(
                "Database required but unavailable, failing startup",
                extra={"error": str(e), "attempts": e.attempts, "startup_require_db": True},
            )
            raise
        logger.warning(
            "Database unavailable, continuing in degraded mode",
            extra={"error": str(e), "attempts": e.attempts, "startup_require_db": False},
        )
        gateway = None

    app.state.gateway = gateway
    return gateway


def startup_scheduler(app: FastAPI, gateway: StorageGateway | None) -> ReminderScheduler | None:
    reminder_settings = get_reminder_settings()
    scheduler = None
    if not reminder_settings.enabled:
        logger.info("Reminder scheduler disabled by configuration")
    elif gateway is None:
        logger.warning("Reminder scheduler not started: database unavailable")
    else:
        scheduler = ReminderScheduler.from_settings(
            gateway,
            reminder_settings,
            clock=getattr(app.state, "clock", None),
        )
        scheduler.start()

    app.state.scheduler = scheduler
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan events."""
    setup_logging(get_logging_settings())
    app_settings = get_app_settings()

    logger.info(
        "Starting application",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    gateway = await startup_database(app)
    scheduler = startup_scheduler(app, gateway)

    logger.info(
        "Application startup complete",
        extra={"database_ready": gateway is not None, "scheduler_running": scheduler is not None},
    )

    try:
        yield
    finally:
        logger.info("Shutting down application", extra={"service": app_settings.service_name})

        if scheduler is not None:
            await scheduler.stop()
            app.state.scheduler = None

        if gateway is not None:
            await gateway.close()
            app.state.gateway = None

        logger.info("Application shutdown complete")

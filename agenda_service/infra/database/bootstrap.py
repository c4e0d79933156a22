"""Startup connection bootstrapper.

``establish()`` turns database settings into a ready StorageGateway, making
a bounded number of attempts with a fixed pause between failures. It never
exits the process: after the last failed attempt it raises
StorageConnectionError and lets the host decide whether to run degraded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from agenda_service.core.settings import get_db_settings
from agenda_service.infra.metrics import database_connect_attempts_total, database_ready
from agenda_service.utils.retry import RetryError, retry

from .gateway import StorageGateway, create_engine_for

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

    from agenda_service.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


class StorageConnectionError(ConnectionError):
    """Raised when every bootstrap attempt failed.

    Attributes:
        attempts: Number of attempts made.
        last_exception: The failure of the final attempt.
    """

    def __init__(self, attempts: int, last_exception: Exception) -> None:
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(
            f"Could not connect to the database after {attempts} attempts: "
            f"{type(last_exception).__name__}: {last_exception}"
        )


async def establish(
    settings: DatabaseSettings | None = None,
    *,
    engine_factory: Callable[[DatabaseSettings], AsyncEngine] = create_engine_for,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> StorageGateway:
    """Connect to storage, retrying with a fixed delay.

    Each attempt builds a fresh engine and runs ``SELECT 1`` within
    ``settings.connect_timeout``; a failed attempt disposes its engine.

    Args:
        settings: Database settings; loaded from the environment when omitted.
        engine_factory: Builds the engine for one attempt.
        sleep: Suspension used between attempts (defaults to ``asyncio.sleep``).

    Returns:
        A ready gateway, as soon as one attempt succeeds.

    Raises:
        StorageConnectionError: After ``settings.startup_retry_attempts`` failures.
    """
    settings = settings or get_db_settings()
    max_attempts = settings.startup_retry_attempts
    attempt = 0

    async def connect_once() -> StorageGateway:
        nonlocal attempt
        attempt += 1
        logger.info(
            f"Connecting to database (attempt {attempt}/{max_attempts})",
            extra={
                "attempt": attempt,
                "max_attempts": max_attempts,
                "target": settings.safe_url,
                "operation": "db.establish",
            },
        )

        engine = None
        try:
            engine = engine_factory(settings)
            gateway = StorageGateway(engine)
            async with asyncio.timeout(settings.connect_timeout):
                await gateway.ping()
        except Exception as exc:
            database_connect_attempts_total.labels(outcome="failure").inc()
            logger.warning(
                f"Database connection attempt {attempt}/{max_attempts} failed",
                extra={
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "operation": "db.establish",
                },
            )
            if engine is not None:
                await engine.dispose()
            raise

        database_connect_attempts_total.labels(outcome="success").inc()
        logger.info(
            "Database connection established",
            extra={"attempt": attempt, "target": settings.safe_url, "operation": "db.establish"},
        )
        return gateway

    connect = retry(
        max_attempts=max_attempts,
        initial_delay=settings.startup_retry_delay,
        max_delay=settings.startup_retry_delay,
        exponential_base=1.0,
        jitter=False,
        sleep=sleep,
    )(connect_once)

    try:
        gateway = await connect()
    except RetryError as exc:
        database_ready.set(0)
        logger.error(
            f"Could not connect to database after {exc.attempts} attempts",
            extra={
                "attempts": exc.attempts,
                "error": str(exc.last_exception),
                "operation": "db.establish",
            },
        )
        raise StorageConnectionError(exc.attempts, exc.last_exception) from exc.last_exception

    database_ready.set(1)
    return gateway

"""Storage gateway: the single owner of the engine and its connection pool.

A gateway is created by the bootstrapper and handed explicitly to every
consumer (request dependencies, the reminder scheduler, CLI commands).
There is no module-level engine.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from agenda_service.core.database import Base

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from agenda_service.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


def create_engine_for(settings: DatabaseSettings) -> AsyncEngine:
    """Build an async engine (and pool) from database settings."""
    return create_async_engine(settings.url, **settings.sqlalchemy_engine_kwargs())


class StorageGateway:
    """Shared handle to the storage pool.

    Sessions are short-lived units of work; the pool behind them is shared
    by all concurrent callers.

    Example:
        async with gateway.session() as session:
            events = await repository.find_imminent(session, now, minutes=30)
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._closed = False

    @property
    def is_ready(self) -> bool:
        return not self._closed

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that is rolled back on error and always closed."""
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Check out a connection and run a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        """Create all mapped tables that do not exist yet."""
        import agenda_service.features.events.models  # noqa: F401  register mapped tables

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured", extra={"operation": "db.create_schema"})

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.engine.dispose()
        logger.info("Database connection closed", extra={"operation": "db.close"})

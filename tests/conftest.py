"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off external infrastructure
    - Database Fixtures: in-memory SQLite engine, session, gateway
    - Time Fixtures: frozen clock
    - Data Fixtures: event factory
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from datetime import UTC, datetime
import os
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without external infrastructure
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_STARTUP_RETRY_ATTEMPTS", "1")
os.environ.setdefault("DB_STARTUP_RETRY_DELAY", "0")
os.environ.setdefault("REMINDER_ENABLED", "false")
os.environ.setdefault("REMINDER_TIMEZONE", "UTC")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

# Monday 2026-03-02 09:00 UTC
FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Re-read settings from the (possibly monkeypatched) environment."""
    from agenda_service.core.settings import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine over a single shared in-memory SQLite connection, with tables created."""
    from agenda_service.core.database.base import Base
    import agenda_service.features.events.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session configured like the gateway's: no expiry on commit, no autoflush."""
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def gateway(db_engine: AsyncEngine):
    """StorageGateway sharing the test engine."""
    from agenda_service.infra.database import StorageGateway

    return StorageGateway(db_engine)


# ============================================================================
# Time Fixtures
# ============================================================================


@pytest.fixture
def frozen_clock():
    from agenda_service.utils.clock import FrozenClock

    return FrozenClock(FIXED_NOW)


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def make_event(db_session: AsyncSession) -> Callable[..., Awaitable[Any]]:
    """Persist an Event and return it.

    Example:
        event = await make_event(title="Standup", scheduled_time=FIXED_NOW)
    """
    from agenda_service.features.events.models import Event

    async def _make(**kwargs: Any) -> Event:
        kwargs.setdefault("title", "Event")
        kwargs.setdefault("scheduled_time", FIXED_NOW)
        event = Event(**kwargs)
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _make

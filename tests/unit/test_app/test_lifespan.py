"""Tests for application startup and shutdown."""

from __future__ import annotations

import pytest

from agenda_service.app.main import create_app
from agenda_service.infra.database import StorageConnectionError

BAD_URL = "sqlite+aiosqlite:////nonexistent-agenda-dir/agenda.db"


@pytest.fixture
def unreachable_db(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", BAD_URL)
    monkeypatch.setenv("DB_STARTUP_RETRY_ATTEMPTS", "2")
    monkeypatch.setenv("DB_STARTUP_RETRY_DELAY", "0")


@pytest.mark.unit
async def test_degraded_mode_when_database_optional(unreachable_db, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("REMINDER_ENABLED", "true")
    app = create_app()

    async with app.router.lifespan_context(app):
        assert app.state.gateway is None
        assert app.state.scheduler is None


@pytest.mark.unit
async def test_startup_fails_when_database_required(unreachable_db, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DB_STARTUP_REQUIRE_DB", "true")
    app = create_app()

    with pytest.raises(StorageConnectionError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.unit
async def test_gateway_and_scheduler_lifecycle(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("REMINDER_ENABLED", "true")
    app = create_app()

    async with app.router.lifespan_context(app):
        gateway = app.state.gateway
        scheduler = app.state.scheduler
        assert gateway is not None
        assert gateway.is_ready
        assert scheduler is not None
        assert scheduler.running

    assert not scheduler.running
    assert not gateway.is_ready
    assert app.state.gateway is None
    assert app.state.scheduler is None


@pytest.mark.unit
async def test_scheduler_disabled(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("REMINDER_ENABLED", "false")
    app = create_app()

    async with app.router.lifespan_context(app):
        assert app.state.gateway is not None
        assert app.state.scheduler is None

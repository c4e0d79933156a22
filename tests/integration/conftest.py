"""Fixtures for HTTP-level tests.

The ASGI transport does not run the lifespan, so tests attach the gateway
and clock to ``app.state`` themselves.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def app(gateway, frozen_clock):
    from agenda_service.app.main import create_app

    application = create_app()
    application.state.gateway = gateway
    application.state.clock = frozen_clock
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

"""Database dependencies for FastAPI route handlers.

The lifespan stores the StorageGateway produced by the bootstrapper on
``app.state.gateway`` (``None`` while running degraded). Handlers get
sessions from that gateway, never from a module-level engine.

FastAPI route handler:
    from agenda_service.core.dependencies.database import get_db_session

    @router.get("/items")
    async def list_items(session: Annotated[AsyncSession, Depends(get_db_session)]):
        ...

Outside a request (CLI, scheduler), use ``gateway.session()`` directly.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agenda_service.core.exceptions import ServiceUnavailableException
from agenda_service.infra.database import StorageGateway


def get_gateway(request: Request) -> StorageGateway:
    """Return the established gateway or fail with 503."""
    gateway: StorageGateway | None = getattr(request.app.state, "gateway", None)
    if gateway is None or not gateway.is_ready:
        raise ServiceUnavailableException(
            detail="Database is not available",
            instance=request.url.path,
            extra={"service": "database"},
        )
    return gateway


async def get_db_session(
    gateway: Annotated[StorageGateway, Depends(get_gateway)],
) -> AsyncGenerator[AsyncSession]:
    """Session scoped to the current request."""
    async with gateway.session() as session:
        yield session


__all__ = ["get_db_session", "get_gateway"]

"""Router registry and setup."""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request

from agenda_service.core.settings import get_app_settings
from agenda_service.features.events.router import notifications_router
from agenda_service.features.events.router import router as events_router
from agenda_service.features.metrics.router import router as metrics_router
from agenda_service.features.reminders.router import router as reminders_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from agenda_service.core.settings import AppSettings

logger = logging.getLogger(__name__)

FEATURES = (
    "events",
    "notifications",
    "today",
    "pending",
    "display",
    "reminders",
    "metrics",
)

root_router = APIRouter(tags=["root"])


@root_router.get("/", summary="Service banner")
async def root(request: Request) -> dict[str, Any]:
    settings = get_app_settings()
    gateway = getattr(request.app.state, "gateway", None)
    return {
        "message": f"{settings.title} is running",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": settings.version,
        "features": list(FEATURES),
        "database": {"ready": gateway is not None and gateway.is_ready},
    }


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    settings = app_settings or get_app_settings()
    api_prefix = settings.api_prefix

    app.include_router(root_router)
    app.include_router(metrics_router)

    app.include_router(events_router, prefix=api_prefix)
    app.include_router(notifications_router, prefix=api_prefix)
    app.include_router(reminders_router, prefix=api_prefix)

    logger.debug("Routers registered", extra={"api_prefix": api_prefix})

"""Middleware configuration for FastAPI application."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from agenda_service.core.settings import get_app_settings
from agenda_service.infra.metrics import http_requests_total

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI, Request, Response

    from agenda_service.core.settings import AppSettings

logger = logging.getLogger(__name__)


def _endpoint_label(request: Request) -> str:
    """Full route template, e.g. "/api/events/{event_id}", or the raw path when unrouted."""
    scope = request.scope
    route = scope.get("route")
    if route is None or not hasattr(route, "path"):
        return request.url.path
    # Routers mounted under a prefix record it in root_path rather than route.path
    mount_prefix = scope.get("root_path", "").removeprefix(scope.get("app_root_path", ""))
    return mount_prefix + route.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count requests by method, route template and status code."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method,
                endpoint=_endpoint_label(request),
                status=str(status_code),
            ).inc()


def configure_middleware(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Configure all middleware for the application.

    Middleware runs in reverse order of registration; CORS is added last so
    it wraps everything, including error responses.
    """
    settings = app_settings or get_app_settings()

    app.add_middleware(MetricsMiddleware)

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.debug("Middleware configured", extra={"cors_origins": origins})

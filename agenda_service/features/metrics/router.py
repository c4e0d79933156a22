"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - http_requests_total - request count by method, route and status
    - database_connect_attempts_total / database_ready - startup bootstrap
    - reminder_cycles_total, reminder_cycle_duration_seconds - scheduler cycles
    - reminder_events_notified_total - due-today flags written
    - reminder_imminent_events / reminder_overdue_events - last cycle counts
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from agenda_service.infra.metrics import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

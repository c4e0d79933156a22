"""API router exposing the reminder scheduler state."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/reminders", tags=["reminders"])


class SchedulerStatus(BaseModel):
    running: bool
    interval_seconds: float | None = None
    cycle_in_progress: bool = False
    last_evaluated_at: datetime | None = None
    last_report: dict[str, Any] | None = None
    last_error: str | None = None


@router.get(
    "/status",
    response_model=SchedulerStatus,
    summary="Reminder scheduler status",
    description="Whether the periodic scheduler is running and what its last cycle found.",
)
async def scheduler_status(request: Request) -> SchedulerStatus:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return SchedulerStatus(running=False)

    report = scheduler.last_report
    return SchedulerStatus(
        running=scheduler.running,
        interval_seconds=scheduler.interval_seconds,
        cycle_in_progress=scheduler.cycle_in_progress,
        last_evaluated_at=report.evaluated_at if report else None,
        last_report=report.to_dict() if report else None,
        last_error=scheduler.last_error,
    )

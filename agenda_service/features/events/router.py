"""API router for the events feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agenda_service.core.dependencies.database import get_db_session
from agenda_service.core.settings import get_reminder_settings
from agenda_service.features.events.repository import EventRepository, get_event_repository
from agenda_service.features.events.schemas import (
    DisplayFeed,
    EventCreate,
    EventResponse,
    EventUpdate,
    NotificationList,
)
from agenda_service.features.events.service import EventService
from agenda_service.utils.clock import Clock, SystemClock

router = APIRouter(prefix="/events", tags=["events"])
notifications_router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_clock(request: Request) -> Clock:
    """Clock configured on the app, falling back to the system clock."""
    return getattr(request.app.state, "clock", None) or SystemClock()


def get_event_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repository: Annotated[EventRepository, Depends(get_event_repository)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> EventService:
    return EventService(session, repository, clock=clock, settings=get_reminder_settings())


EventServiceDep = Annotated[EventService, Depends(get_event_service)]


@router.get(
    "",
    response_model=list[EventResponse],
    summary="List events",
    description="Return every event ordered by scheduled time, earliest first.",
)
async def list_events(service: EventServiceDep) -> list[EventResponse]:
    events = await service.list_events()
    return [EventResponse.model_validate(event) for event in events]


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
async def create_event(payload: EventCreate, service: EventServiceDep) -> EventResponse:
    event = await service.create_event(payload)
    return EventResponse.model_validate(event)


@router.get(
    "/today",
    response_model=list[EventResponse],
    summary="Today's events",
    description="Events scheduled within the current calendar day, completed ones included.",
)
async def list_today(service: EventServiceDep) -> list[EventResponse]:
    events = await service.list_today()
    return [EventResponse.model_validate(event) for event in events]


@router.get(
    "/pending",
    response_model=list[EventResponse],
    summary="Upcoming open events",
    description="Events not completed and scheduled from now on.",
)
async def list_pending(service: EventServiceDep) -> list[EventResponse]:
    events = await service.list_pending()
    return [EventResponse.model_validate(event) for event in events]


@router.get(
    "/display",
    response_model=DisplayFeed,
    summary="Compact feed for small displays",
    description=(
        "Up to 10 of today's open events as `{t, h, p}`: title truncated to 30 "
        "characters, local `HH:MM`, and the priority initial."
    ),
)
async def display_feed(service: EventServiceDep) -> DisplayFeed:
    return await service.display_feed()


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get an event",
    responses={404: {"description": "Event not found"}},
)
async def get_event(event_id: int, service: EventServiceDep) -> EventResponse:
    event = await service.get_event(event_id)
    return EventResponse.model_validate(event)


@router.put(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update an event",
    description="Partial update: fields left out of the body keep their value.",
    responses={
        404: {"description": "Event not found"},
        409: {"description": "Completed events cannot be reopened"},
    },
)
async def update_event(event_id: int, payload: EventUpdate, service: EventServiceDep) -> EventResponse:
    event = await service.update_event(event_id, payload)
    return EventResponse.model_validate(event)


@router.post(
    "/{event_id}/complete",
    response_model=EventResponse,
    summary="Mark an event as completed",
    responses={404: {"description": "Event not found"}},
)
async def complete_event(event_id: int, service: EventServiceDep) -> EventResponse:
    event = await service.complete_event(event_id)
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an event",
    responses={404: {"description": "Event not found"}},
)
async def delete_event(event_id: int, service: EventServiceDep) -> Response:
    await service.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@notifications_router.get(
    "",
    response_model=NotificationList,
    summary="Imminent events",
    description="Open events starting within the reminder look-ahead window, with minutes remaining.",
)
async def list_notifications(service: EventServiceDep) -> NotificationList:
    return await service.notifications()

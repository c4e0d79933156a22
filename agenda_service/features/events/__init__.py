"""Events feature package."""

from .repository import EventRepository, get_event_repository
from .router import notifications_router, router

__all__ = [
    "router",
    "notifications_router",
    "EventRepository",
    "get_event_repository",
]

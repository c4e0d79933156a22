from __future__ import annotations

from .database import get_db_session, get_gateway

__all__ = ["get_db_session", "get_gateway"]

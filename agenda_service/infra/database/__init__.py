"""Database infrastructure: connection bootstrap and the shared storage gateway."""

from __future__ import annotations

from .bootstrap import StorageConnectionError, establish
from .gateway import StorageGateway, create_engine_for

__all__ = [
    "StorageConnectionError",
    "StorageGateway",
    "create_engine_for",
    "establish",
]

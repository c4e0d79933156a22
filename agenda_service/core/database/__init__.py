"""Database primitives: declarative base, mixins, repository base, errors."""

from __future__ import annotations

from .base import NAMING_CONVENTION, Base, IntegerPKMixin, TimestampMixin
from .exceptions import NotFoundError, RepositoryError
from .repository import BaseRepository
from .types import UTCDateTime

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "NotFoundError",
    "RepositoryError",
    "TimestampMixin",
    "UTCDateTime",
]

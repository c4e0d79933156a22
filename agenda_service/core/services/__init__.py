from __future__ import annotations

from .base import BaseService

__all__ = ["BaseService"]

from __future__ import annotations

from agenda_service.utils.retry.decorator import retry
from agenda_service.utils.retry.exceptions import RetryError, RetryStatistics
from agenda_service.utils.retry.strategies import RetryStrategy

__all__ = ["retry", "RetryError", "RetryStatistics", "RetryStrategy"]

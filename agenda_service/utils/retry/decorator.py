from __future__ import annotations

import asyncio
from functools import wraps
import logging
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from .exceptions import RetryError, RetryStatistics
from .strategies import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    jitter_range: tuple[float, float] = (0.5, 1.5),
    exceptions: tuple[type[Exception], ...] = (Exception,),
    retry_if: Callable[[Exception], bool] | None = None,
    on_retry: Callable[[Exception, int, float], None] | None = None,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable, suspending between failed attempts.

    Args:
        max_attempts: Total calls allowed, including the first one.
        initial_delay: Delay before the second attempt.
        exponential_base: Growth factor per attempt (1.0 keeps the delay fixed).
        jitter: Multiply each delay by a random factor from ``jitter_range``.
        exceptions: Exception types considered retryable.
        retry_if: Predicate overriding ``exceptions``.
        on_retry: Called as ``on_retry(exc, attempt, delay)`` before each suspension.
        sleep: Awaitable used to suspend; defaults to ``asyncio.sleep``.

    Raises:
        RetryError: After the last attempt fails, wrapping the last exception.
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter,
        jitter_range=jitter_range,
        exceptions=exceptions,
        retry_if=retry_if,
    )

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            statistics = RetryStatistics(start_time=time.monotonic())
            suspend = sleep or asyncio.sleep

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not strategy.should_retry(e):
                        logger.warning(
                            f"Non-retryable exception in {func.__name__}: {e}",
                            extra={"function": func.__name__, "exception": str(e)},
                        )
                        raise

                    statistics.exceptions.append(type(e).__name__)

                    if attempt >= max_attempts - 1:
                        statistics.end_time = time.monotonic()
                        logger.error(
                            f"All retry attempts exhausted for {func.__name__}",
                            extra={
                                "function": func.__name__,
                                "attempts": attempt + 1,
                                "last_exception": str(e),
                                "total_delay": statistics.total_delay,
                                "duration": statistics.duration,
                            },
                        )
                        raise RetryError(e, attempt + 1, statistics) from e

                    delay = strategy.calculate_delay(attempt)
                    statistics.attempts += 1
                    statistics.total_delay += delay

                    logger.warning(
                        f"Retrying {func.__name__} after {delay:.2f}s (attempt {attempt + 1}/{max_attempts})",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_attempts": max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )

                    if on_retry:
                        on_retry(e, attempt + 1, delay)

                    await suspend(delay)

            msg = "Retry logic error: exhausted all attempts"
            raise RuntimeError(msg)

        return async_wrapper

    return decorator

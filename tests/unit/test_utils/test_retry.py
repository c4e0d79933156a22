"""Unit tests for the retry decorator."""

from __future__ import annotations

import pytest

from agenda_service.utils.retry import RetryError, retry


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.unit
class TestRetryDecorator:
    """Test suite for retry decorator."""

    async def test_retry_succeeds_first_attempt(self):
        call_count = 0
        sleep = RecordingSleep()

        @retry(max_attempts=3, sleep=sleep)
        async def successful_func():
            nonlocal call_count
            call_count += 1
            return "success"

        assert await successful_func() == "success"
        assert call_count == 1
        assert sleep.delays == []

    async def test_retry_succeeds_after_retries(self):
        call_count = 0

        @retry(max_attempts=3, initial_delay=0.01)
        async def eventually_successful():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ValueError("Not yet")
            return "success"

        assert await eventually_successful() == "success"
        assert call_count == 3

    async def test_retry_fails_after_max_attempts(self):
        call_count = 0
        sleep = RecordingSleep()

        @retry(max_attempts=3, initial_delay=0.5, sleep=sleep)
        async def always_fails():
            nonlocal call_count
            call_count += 1
            raise ValueError("Always fails")

        with pytest.raises(RetryError) as exc_info:
            await always_fails()

        assert call_count == 3
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_exception, ValueError)
        assert "after 3 attempts" in str(exc_info.value)
        # No suspension after the final failure
        assert len(sleep.delays) == 2

    async def test_fixed_delay_without_jitter(self):
        sleep = RecordingSleep()

        @retry(max_attempts=4, initial_delay=5.0, max_delay=5.0, exponential_base=1.0, jitter=False, sleep=sleep)
        async def always_fails():
            raise ConnectionError("down")

        with pytest.raises(RetryError):
            await always_fails()

        assert sleep.delays == [5.0, 5.0, 5.0]

    async def test_exponential_backoff_is_capped(self):
        sleep = RecordingSleep()

        @retry(max_attempts=5, initial_delay=1.0, max_delay=3.0, jitter=False, sleep=sleep)
        async def always_fails():
            raise ValueError

        with pytest.raises(RetryError):
            await always_fails()

        assert sleep.delays == [1.0, 2.0, 3.0, 3.0]

    async def test_retry_only_retries_specified_exceptions(self):
        call_count = 0

        @retry(max_attempts=3, initial_delay=0.01, exceptions=(ValueError,))
        async def raises_type_error():
            nonlocal call_count
            call_count += 1
            raise TypeError("Wrong type")

        with pytest.raises(TypeError):
            await raises_type_error()
        assert call_count == 1

    async def test_on_retry_callback(self):
        seen: list[tuple[str, int, float]] = []

        @retry(
            max_attempts=3,
            initial_delay=0.0,
            jitter=False,
            on_retry=lambda exc, attempt, delay: seen.append((str(exc), attempt, delay)),
            sleep=RecordingSleep(),
        )
        async def always_fails():
            raise ValueError("boom")

        with pytest.raises(RetryError):
            await always_fails()

        assert seen == [("boom", 1, 0.0), ("boom", 2, 0.0)]

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            retry(max_attempts=0)

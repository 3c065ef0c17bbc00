from unittest.mock import AsyncMock, patch

import pytest

from weatherwell.data_collection.rate_limiter import RateLimiter, build_rate_limiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:

    def test_safety_buffer_applied(self):
        assert RateLimiter(calls_per_minute=60, safety_buffer=0.8).limit == 48
        assert RateLimiter(calls_per_minute=1, safety_buffer=0.5).limit == 1

    @pytest.mark.asyncio
    async def test_no_wait_under_limit(self):
        clock = FakeClock()
        limiter = RateLimiter(calls_per_minute=3, safety_buffer=1.0, clock=clock)

        with patch("weatherwell.data_collection.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            for _ in range(3):
                await limiter.acquire()

        mock_sleep.assert_not_awaited()
        assert limiter.get_remaining_calls() == 0
        assert limiter.get_stats()["total_calls"] == 3

    @pytest.mark.asyncio
    async def test_waits_for_oldest_call_to_leave_window(self):
        clock = FakeClock()
        limiter = RateLimiter(calls_per_minute=2, safety_buffer=1.0, clock=clock)

        async def advance(seconds):
            clock.now += seconds

        with patch("weatherwell.data_collection.rate_limiter.asyncio.sleep", side_effect=advance) as mock_sleep:
            await limiter.acquire()
            clock.now += 20
            await limiter.acquire()
            await limiter.acquire()

        mock_sleep.assert_called_once()
        assert mock_sleep.call_args[0][0] == pytest.approx(40.0)
        assert limiter.get_stats()["total_wait_time"] == pytest.approx(40.0)

    def test_window_expiry_frees_slots(self):
        clock = FakeClock()
        limiter = RateLimiter(calls_per_minute=2, safety_buffer=1.0, clock=clock)
        limiter.call_history.extend([clock.now, clock.now])

        assert limiter.get_remaining_calls() == 0
        clock.now += 61
        assert limiter.get_remaining_calls() == 2


def test_build_rate_limiter_from_config():
    assert build_rate_limiter({"calls_per_minute": 0}) is None
    limiter = build_rate_limiter({"calls_per_minute": 100, "safety_buffer": 0.5})
    assert limiter.limit == 50

"""
Rate Limiter for the OpenWeatherMap API
Keeps upstream calls inside the free tier per-minute allowance
"""

import asyncio
import time
from collections import deque
from typing import Callable, Dict, Optional

from weatherwell.utils.logger import get_logger


class RateLimiter:
    """
    Async sliding-window limiter with safety buffer
    Tracks calls made during the last `window_seconds`
    """

    def __init__(
        self,
        calls_per_minute: int = 60,
        safety_buffer: float = 0.8,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        logger=None
    ):
        """
        Initialize rate limiter

        Args:
            calls_per_minute: Upstream allowance per window
            safety_buffer: Fraction of the allowance actually used
            window_seconds: Length of the sliding window
            clock: Monotonic time source (seconds)
            logger: Logger instance
        """
        self.limit = max(1, int(calls_per_minute * safety_buffer))
        self.window_seconds = window_seconds
        self.clock = clock
        self.logger = logger or get_logger()

        self.call_history = deque()
        self._lock = asyncio.Lock()

        # Statistics
        self.stats = {
            'total_calls': 0,
            'total_wait_time': 0.0
        }

        self.logger.debug(f"Rate limiter initialized: {self.limit} calls per {self.window_seconds:.0f}s")

    async def acquire(self):
        """
        Wait until a call slot is free, then record the call
        """
        async with self._lock:
            self._clean_old_entries(self.clock())

            if len(self.call_history) >= self.limit:
                wait_time = self._calculate_wait_time()
                self.logger.warning(f"Upstream rate limit reached. Waiting {wait_time:.1f} seconds...")
                self.stats['total_wait_time'] += wait_time
                await asyncio.sleep(wait_time)
                self._clean_old_entries(self.clock())

            self.call_history.append(self.clock())
            self.stats['total_calls'] += 1

    def _clean_old_entries(self, now: float):
        """Remove calls that left the window"""
        cutoff = now - self.window_seconds
        while self.call_history and self.call_history[0] <= cutoff:
            self.call_history.popleft()

    def _calculate_wait_time(self) -> float:
        """Seconds until the oldest call leaves the window"""
        if not self.call_history:
            return 0.0
        elapsed = self.clock() - self.call_history[0]
        return max(0.0, self.window_seconds - elapsed)

    def get_remaining_calls(self) -> int:
        self._clean_old_entries(self.clock())
        return self.limit - len(self.call_history)

    def get_stats(self) -> Dict:
        """Get rate limiter statistics"""
        return {
            'total_calls': self.stats['total_calls'],
            'total_wait_time': round(self.stats['total_wait_time'], 2),
            'remaining': self.get_remaining_calls(),
            'limit': self.limit
        }


def build_rate_limiter(config: Optional[Dict] = None, logger=None) -> Optional[RateLimiter]:
    """
    Create a limiter from the `weather` config section, or None when disabled

    Args:
        config: Weather configuration (calls_per_minute, safety_buffer)
        logger: Logger instance

    Returns:
        RateLimiter or None
    """
    config = config or {}
    calls_per_minute = config.get('calls_per_minute', 60)
    if not calls_per_minute:
        return None
    return RateLimiter(
        calls_per_minute=calls_per_minute,
        safety_buffer=config.get('safety_buffer', 0.8),
        logger=logger
    )

"""
Cache refresh scheduler.
Re-runs the weather fetch cycle periodically so the ranked list stays warm.
"""
import asyncio
from typing import Optional

from weatherwell.exceptions import WeatherSourceError
from weatherwell.utils.helpers import format_duration
from weatherwell.utils.logger import get_logger


class RefreshScheduler:
    """
    Background task that refreshes the weather cache every interval.
    """

    def __init__(self, weather_service, interval_seconds: int = 300, logger=None):
        """
        Initialize refresh scheduler.

        Args:
            weather_service: WeatherService whose cache is refreshed
            interval_seconds: Interval between refreshes in seconds (default: 300 = 5 minutes)
            logger: Logger instance
        """
        self.weather_service = weather_service
        self.interval_seconds = interval_seconds
        self.logger = logger or get_logger()
        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def _scheduler_loop(self):
        """
        Main scheduler loop that runs until stopped.
        """
        self.logger.info(f"🌤️  Refresh scheduler started (interval: {format_duration(self.interval_seconds)})")

        while self.running:
            try:
                await self.weather_service.refresh()
            except asyncio.CancelledError:
                raise
            except WeatherSourceError as e:
                self.logger.error(f"✗ Scheduled refresh failed: {e}")
            except Exception as e:
                # Keep the loop alive; the next request falls back to an on-demand cycle
                self.logger.exception(f"✗ Scheduler loop error: {e}")

            await asyncio.sleep(self.interval_seconds)

    async def start(self):
        """
        Start the refresh scheduler.
        """
        if self.running:
            self.logger.warning("Refresh scheduler is already running")
            return

        self.running = True
        self.task = asyncio.create_task(self._scheduler_loop())

    async def stop(self):
        """
        Stop the refresh scheduler.
        """
        if not self.running:
            return

        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        self.logger.info("🛑 Refresh scheduler stopped")

"""
Async weather service: fetch, score, rank and cache all configured cities.
"""
import asyncio
import time
from typing import List, Optional, Sequence

from api.config import City
from api.services.result_cache import ResultCache
from weatherwell.data_collection.api_client import OpenWeatherClient
from weatherwell.exceptions import WeatherSourceAuthError, WeatherSourceError
from weatherwell.scoring.comfort_score import ScoreCalculator
from weatherwell.scoring.observation import ScoredCity, WeatherObservation
from weatherwell.scoring.ranker import rank_cities
from weatherwell.utils.logger import get_logger


class CacheStatus:
    NONE = "NONE"
    HIT = "HIT"
    MISS = "MISS"


class WeatherService:
    """
    Runs fetch cycles over the configured cities and caches the ranked result.
    """

    def __init__(
        self,
        client: OpenWeatherClient,
        cities: Sequence[City],
        calculator: Optional[ScoreCalculator] = None,
        cache: Optional[ResultCache] = None,
        cache_ttl_seconds: int = 300,
        logger=None
    ):
        """
        Initialize weather service.

        Args:
            client: Upstream weather client
            cities: Cities to fetch, in display order
            calculator: Comfort score calculator (default algorithm version if omitted)
            cache: Result cache shared with other services
            cache_ttl_seconds: Lifetime of a cached ranked list
            logger: Logger instance
        """
        self.client = client
        self.cities = list(cities)
        self.calculator = calculator if calculator is not None else ScoreCalculator()
        self.cache = cache if cache is not None else ResultCache(default_ttl_seconds=cache_ttl_seconds)
        self.cache_ttl_seconds = cache_ttl_seconds
        self.logger = logger or get_logger()

        self.last_cache_status = CacheStatus.NONE
        self._cycle_lock = asyncio.Lock()

    @property
    def cache_key(self) -> str:
        # Versioned so a formula change never serves scores from the old formula
        return f"weather_results:{self.calculator.version}"

    def get_last_cache_status(self) -> str:
        return self.last_cache_status

    async def get_all_cities_weather(self) -> List[ScoredCity]:
        """
        Return the ranked city list, from cache when fresh.

        Returns:
            Scored and ranked cities in configured order

        Raises:
            WeatherSourceAuthError: If the upstream rejects the API key
        """
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            self.last_cache_status = CacheStatus.HIT
            self.logger.debug("Weather results served from cache")
            return cached

        async with self._cycle_lock:
            # Another request may have completed a cycle while we waited
            cached = self.cache.get(self.cache_key)
            if cached is not None:
                self.last_cache_status = CacheStatus.HIT
                return cached

            self.last_cache_status = CacheStatus.MISS
            self.logger.debug("Weather cache miss, starting fetch cycle")
            return await self._run_cycle()

    async def refresh(self) -> List[ScoredCity]:
        """Run a fetch cycle now, regardless of cache state."""
        async with self._cycle_lock:
            return await self._run_cycle()

    async def _run_cycle(self) -> List[ScoredCity]:
        started = time.monotonic()

        observations = await self._fetch_observations()
        scored = self.calculator.score_cities(observations)
        ranked = rank_cities(scored)

        if ranked:
            self.cache.set(self.cache_key, ranked, ttl_seconds=self.cache_ttl_seconds)
        else:
            self.logger.warning("Fetch cycle produced no cities; result not cached")

        self.logger.info(
            f"Fetch cycle finished: {len(ranked)}/{len(self.cities)} cities scored "
            f"in {time.monotonic() - started:.2f}s"
        )
        return ranked

    async def _fetch_observations(self) -> List[WeatherObservation]:
        """
        Fetch every configured city concurrently, skipping failures.

        Returns:
            Observations in configured city order, failed cities omitted
        """
        outcomes = await asyncio.gather(
            *(self.client.get_observation(city.city_id, default_name=city.city_name) for city in self.cities),
            return_exceptions=True
        )

        observations = []
        for city, outcome in zip(self.cities, outcomes):
            if isinstance(outcome, (WeatherSourceAuthError, asyncio.CancelledError)):
                raise outcome
            if isinstance(outcome, WeatherSourceError):
                self.logger.warning(f"Skipping city {city.city_name} ({city.city_id}): {outcome}")
                continue
            if isinstance(outcome, Exception):
                self.logger.error(f"Unexpected error fetching city {city.city_name} ({city.city_id}): {outcome!r}")
                continue
            observations.append(outcome)

        return observations

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from api.config import City
from api.services.result_cache import ResultCache
from api.services.weather_service import CacheStatus, WeatherService
from weatherwell.exceptions import ObservationParseError, WeatherSourceAuthError, WeatherSourceError
from weatherwell.scoring.comfort_config import ComfortConfig
from weatherwell.scoring.comfort_score import ScoreCalculator

CITIES = [City(1, "Alpha"), City(2, "Bravo"), City(3, "Charlie")]


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def client(observation_factory):
    """Client returning one observation per city id; Bravo is most comfortable."""
    temperatures = {1: 35.0, 2: 22.0, 3: 27.0}

    async def get_observation(city_id, default_name=None):
        return observation_factory(city_id=city_id, city_name=default_name, temperature=temperatures[city_id])

    mock = MagicMock()
    mock.get_observation = AsyncMock(side_effect=get_observation)
    return mock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(client, clock):
    return WeatherService(client=client, cities=CITIES, cache=ResultCache(clock=clock), cache_ttl_seconds=300)


class TestWeatherService:

    @pytest.mark.asyncio
    async def test_fetch_cycle_scores_and_ranks_in_city_order(self, service):
        results = await service.get_all_cities_weather()

        assert [city.city_name for city in results] == ["Alpha", "Bravo", "Charlie"]
        assert [city.rank for city in results] == [3, 1, 2]
        assert results[1].comfort_score == 96.1
        assert service.get_last_cache_status() == CacheStatus.MISS

    @pytest.mark.asyncio
    async def test_cache_status_starts_as_none(self, service):
        assert service.get_last_cache_status() == CacheStatus.NONE

    @pytest.mark.asyncio
    async def test_second_call_is_cache_hit(self, service, client):
        first = await service.get_all_cities_weather()
        second = await service.get_all_cities_weather()

        assert second is first
        assert service.get_last_cache_status() == CacheStatus.HIT
        assert client.get_observation.await_count == len(CITIES)

    def test_injected_empty_cache_is_used(self, client):
        shared = ResultCache()

        service = WeatherService(client=client, cities=CITIES, cache=shared)

        assert service.cache is shared

    @pytest.mark.asyncio
    async def test_cache_expires_after_ttl(self, service, client, clock):
        await service.get_all_cities_weather()
        clock.now += timedelta(seconds=301)
        await service.get_all_cities_weather()

        assert service.get_last_cache_status() == CacheStatus.MISS
        assert client.get_observation.await_count == 2 * len(CITIES)

    @pytest.mark.asyncio
    async def test_failed_city_is_skipped(self, service, client, observation_factory):
        async def get_observation(city_id, default_name=None):
            if city_id == 2:
                raise WeatherSourceError("upstream down", city_id=city_id)
            if city_id == 3:
                raise ObservationParseError("bad payload", city_id=city_id)
            return observation_factory(city_id=city_id, city_name=default_name)

        client.get_observation.side_effect = get_observation

        results = await service.get_all_cities_weather()

        assert [city.city_name for city in results] == ["Alpha"]
        assert results[0].rank == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_is_skipped(self, service, client, observation_factory):
        async def get_observation(city_id, default_name=None):
            if city_id == 1:
                raise RuntimeError("bug")
            return observation_factory(city_id=city_id, city_name=default_name)

        client.get_observation.side_effect = get_observation

        results = await service.get_all_cities_weather()
        assert [city.rank for city in results] == [1, 2]

    @pytest.mark.asyncio
    async def test_total_failure_returns_empty_and_is_not_cached(self, service, client):
        client.get_observation.side_effect = WeatherSourceError("down")

        assert await service.get_all_cities_weather() == []
        assert len(service.cache) == 0

        await service.get_all_cities_weather()
        assert service.get_last_cache_status() == CacheStatus.MISS

    @pytest.mark.asyncio
    async def test_auth_error_aborts_cycle(self, service, client):
        client.get_observation.side_effect = WeatherSourceAuthError("bad key", status_code=401)

        with pytest.raises(WeatherSourceAuthError):
            await service.get_all_cities_weather()
        assert len(service.cache) == 0

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_cycle(self, service, client):
        results = await asyncio.gather(*(service.get_all_cities_weather() for _ in range(5)))

        assert all(result is results[0] for result in results)
        assert client.get_observation.await_count == len(CITIES)

    @pytest.mark.asyncio
    async def test_cache_key_follows_algorithm_version(self, client, clock):
        cache = ResultCache(clock=clock)
        v3 = WeatherService(client=client, cities=CITIES, cache=cache)
        v4 = WeatherService(
            client=client, cities=CITIES, cache=cache,
            calculator=ScoreCalculator(ComfortConfig(version="v4"))
        )

        await v3.get_all_cities_weather()
        await v4.get_all_cities_weather()

        assert v3.cache_key == "weather_results:v3"
        assert v4.cache_key == "weather_results:v4"
        assert v4.get_last_cache_status() == CacheStatus.MISS

    @pytest.mark.asyncio
    async def test_refresh_ignores_fresh_cache(self, service, client):
        await service.get_all_cities_weather()
        await service.refresh()

        assert client.get_observation.await_count == 2 * len(CITIES)


class TestResultCache:

    def test_set_get_and_expiry(self, clock):
        cache = ResultCache(default_ttl_seconds=10, clock=clock)
        cache.set("key", [1, 2])

        assert cache.get("key") == [1, 2]
        clock.now += timedelta(seconds=10)
        assert cache.get("key") is None

    def test_purge_and_len(self, clock):
        cache = ResultCache(clock=clock)
        cache.set("short", 1, ttl_seconds=5)
        cache.set("long", 2, ttl_seconds=500)

        clock.now += timedelta(seconds=6)

        assert cache.purge_expired() == 1
        assert len(cache) == 1

    def test_invalidate_and_clear(self, clock):
        cache = ResultCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        assert cache.get("a") is None
        cache.clear()
        assert len(cache) == 0

"""
OpenWeatherMap API Client
Fetches current conditions per city with retry logic and maps them to observations
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from weatherwell.exceptions import ObservationParseError, WeatherSourceAuthError, WeatherSourceError
from weatherwell.scoring.observation import WeatherObservation, detect_snow
from weatherwell.utils.helpers import safe_float
from weatherwell.utils.logger import get_logger


def parse_observation(
    data: Dict[str, Any],
    default_name: Optional[str] = None,
    default_id: Optional[int] = None
) -> WeatherObservation:
    """
    Map an OpenWeatherMap current-weather payload to an observation

    Visibility arrives in metres and is converted to whole kilometres.
    Temperature and wind speed are rounded to 1 decimal.

    Args:
        data: Decoded JSON payload
        default_name: City name used when the payload has none
        default_id: City id used when the payload has none

    Returns:
        WeatherObservation

    Raises:
        ObservationParseError: If a required field is missing or not finite
    """
    if not isinstance(data, dict):
        raise ObservationParseError("Payload is not a JSON object")

    city_id = data.get("id")
    if city_id is None:
        city_id = default_id
    main = data.get("main") or {}
    wind = data.get("wind") or {}
    clouds = data.get("clouds") or {}

    temperature = safe_float(main.get("temp"), decimals=1)
    humidity = safe_float(main.get("humidity"))
    wind_speed = safe_float(wind.get("speed"), decimals=1)

    missing = [
        name for name, value in (
            ("id", safe_float(city_id)),
            ("main.temp", temperature),
            ("main.humidity", humidity),
            ("wind.speed", wind_speed),
        )
        if value is None
    ]
    if missing:
        raise ObservationParseError(f"Missing or invalid fields: {', '.join(missing)}", city_id=city_id)

    conditions = data.get("weather") or []
    description = "Unknown"
    if conditions and isinstance(conditions[0], dict) and conditions[0].get("description"):
        description = str(conditions[0]["description"])

    visibility_m = safe_float(data.get("visibility"), default=0.0)

    return WeatherObservation(
        city_id=int(safe_float(city_id)),
        city_name=str(data.get("name") or default_name or city_id),
        temperature=temperature,
        humidity=int(humidity),
        wind_speed=wind_speed,
        cloud_percentage=int(safe_float(clouds.get("all"), default=0.0)),
        visibility=int(visibility_m) // 1000,
        pressure=int(safe_float(main.get("pressure"), default=0.0)),
        weather_description=description,
        is_snowing=detect_snow(description),
    )


class OpenWeatherClient:
    """
    Async client for the OpenWeatherMap current weather endpoint
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        rate_limiter=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize API client

        Args:
            api_key: OpenWeatherMap application key
            base_url: Base URL of the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per city
            retry_delay: Seconds between attempts (doubled after a 429)
            rate_limiter: RateLimiter instance
            transport: Optional httpx transport (tests)
            logger: Logger instance
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.rate_limiter = rate_limiter
        self.transport = transport
        self.logger = logger or get_logger()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def fetch_current(self, city_id: int) -> Dict[str, Any]:
        """
        Fetch raw current conditions for one city

        Args:
            city_id: OpenWeatherMap city identifier

        Returns:
            API response as dictionary

        Raises:
            WeatherSourceAuthError: If the API key is rejected (no retry)
            WeatherSourceError: If the request fails after all retries
        """
        endpoint = f"{self.base_url}/weather"
        params = {"id": city_id, "appid": self.api_key, "units": "metric"}

        async with self._client() as client:
            for attempt in range(self.max_retries):
                last_attempt = attempt == self.max_retries - 1

                if self.rate_limiter:
                    await self.rate_limiter.acquire()

                try:
                    self.logger.debug(f"Fetching city {city_id} (attempt {attempt + 1}/{self.max_retries})")
                    response = await client.get(endpoint, params=params)
                except httpx.TimeoutException:
                    self.logger.warning(f"Request timeout for city {city_id} (attempt {attempt + 1}/{self.max_retries})")
                    if last_attempt:
                        raise WeatherSourceError("Request timed out after all retries", city_id=city_id)
                    await asyncio.sleep(self.retry_delay)
                    continue
                except httpx.TransportError as e:
                    self.logger.warning(f"Connection error for city {city_id}: {e}")
                    if last_attempt:
                        raise WeatherSourceError(f"Connection failed after all retries: {e}", city_id=city_id)
                    await asyncio.sleep(self.retry_delay)
                    continue

                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError:
                        raise ObservationParseError("Response is not valid JSON", city_id=city_id)

                if response.status_code == 401:
                    raise WeatherSourceAuthError(
                        "Weather API rejected the API key", city_id=city_id, status_code=401
                    )

                if response.status_code == 404:
                    raise WeatherSourceError(f"Unknown city id {city_id}", city_id=city_id, status_code=404)

                if response.status_code == 429:
                    self.logger.warning(f"Rate limit exceeded (429). Waiting {self.retry_delay * 2} seconds...")
                    if last_attempt:
                        break
                    await asyncio.sleep(self.retry_delay * 2)
                    continue

                self.logger.error(f"API error for city {city_id}: {response.status_code} - {response.text}")
                if last_attempt:
                    raise WeatherSourceError(
                        f"API request failed: {response.status_code}",
                        city_id=city_id,
                        status_code=response.status_code
                    )
                await asyncio.sleep(self.retry_delay)

        raise WeatherSourceError("Request failed after all retries", city_id=city_id)

    async def get_observation(self, city_id: int, default_name: Optional[str] = None) -> WeatherObservation:
        """
        Fetch and parse one city's current conditions

        Args:
            city_id: OpenWeatherMap city identifier
            default_name: Configured city name, used if upstream omits one

        Returns:
            WeatherObservation
        """
        data = await self.fetch_current(city_id)
        return parse_observation(data, default_name=default_name, default_id=city_id)

    async def test_connection(self) -> bool:
        """
        Check that the API host answers at all

        Returns:
            True if the host responded, False otherwise
        """
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/weather", params={"id": 0, "appid": self.api_key})
            # Any HTTP answer (even 401/404) means the host is reachable
            return response.status_code < 500
        except httpx.HTTPError as e:
            self.logger.warning(f"Weather API unreachable: {e}")
            return False

"""
Dependency injection for FastAPI.
Builds the long-lived services once and shares them across requests.
"""
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import Auth0Settings, get_openweather_api_key, load_api_config, load_cities
from api.services.identity_service import IdentityService
from api.services.weather_service import WeatherService
from weatherwell.data_collection.api_client import OpenWeatherClient
from weatherwell.data_collection.rate_limiter import build_rate_limiter
from weatherwell.exceptions import IdentityProviderError
from weatherwell.scoring.comfort_config import DEFAULT_COMFORT_CONFIG
from weatherwell.scoring.comfort_score import ScoreCalculator
from weatherwell.utils.logger import get_logger

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_weather_service() -> WeatherService:
    """
    Create the weather service once and cache it in memory.

    Returns:
        WeatherService: Service bound to the configured cities and algorithm version
    """
    config = load_api_config()
    weather_config = config["weather"]
    logger = get_logger()

    client = OpenWeatherClient(
        api_key=get_openweather_api_key(),
        base_url=weather_config.get("base_url", "https://api.openweathermap.org/data/2.5"),
        timeout=weather_config.get("timeout", 10),
        max_retries=weather_config.get("max_retries", 3),
        retry_delay=weather_config.get("retry_delay", 2),
        rate_limiter=build_rate_limiter(weather_config, logger=logger),
        logger=logger,
    )
    cities = load_cities(weather_config.get("cities_file", "config/cities.json"), logger=logger)
    logger.info(f"Loaded {len(cities)} cities")

    return WeatherService(
        client=client,
        cities=cities,
        calculator=ScoreCalculator(DEFAULT_COMFORT_CONFIG),
        cache_ttl_seconds=config["cache"].get("ttl_seconds", 300),
        logger=logger,
    )


@lru_cache()
def get_identity_service() -> IdentityService:
    """
    Create the identity service once and cache it in memory.

    Returns:
        IdentityService: Service reading Auth0 settings from the environment
    """
    config = load_api_config()
    return IdentityService(
        settings=Auth0Settings.from_env(),
        token_cache_seconds=config["auth"].get("token_cache_seconds", 300),
        logger=get_logger(),
    )


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity_service: IdentityService = Depends(get_identity_service),
) -> Optional[Dict[str, Any]]:
    """
    Gate an endpoint behind a valid Auth0 access token when auth is enabled.

    Returns:
        User profile, or None when auth is disabled

    Raises:
        401: Missing or rejected token
        503: Identity provider unavailable or not configured
    """
    if not load_api_config()["auth"].get("enabled", False):
        return None

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        profile = await identity_service.verify_access_token(credentials.credentials)
    except IdentityProviderError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile

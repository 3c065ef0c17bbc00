"""
Health check endpoints for monitoring API status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from api.dependencies import get_weather_service
from api.services.weather_service import WeatherService

router = APIRouter()


@router.get("/health/status", status_code=status.HTTP_200_OK)
async def get_status():
    """Liveness probe."""
    return {"status": "API is running!", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(weather_service: WeatherService = Depends(get_weather_service)):
    """
    Health check endpoint to verify API status.

    Returns:
        dict: System health status including weather API reachability and cache
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "weather_api": "unknown",
        "cache": {
            "entries": len(weather_service.cache),
            "last_status": weather_service.get_last_cache_status(),
        },
        "cities": len(weather_service.cities),
        "algorithm_version": weather_service.calculator.version,
    }

    if await weather_service.client.test_connection():
        health_status["weather_api"] = "available"
    else:
        health_status["weather_api"] = "unreachable"
        health_status["status"] = "degraded"

    return health_status

"""
Weather endpoints: ranked comfort list and cache diagnostics.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_weather_service, require_user
from api.models.weather import CacheStatusResponse, CityWeatherResult
from api.services.weather_service import WeatherService
from weatherwell.exceptions import WeatherSourceError
from weatherwell.utils.logger import get_logger

router = APIRouter()


@router.get(
    "/weather",
    response_model=List[CityWeatherResult],
    status_code=status.HTTP_200_OK,
    summary="Get ranked weather for all cities",
    description="Current weather of every configured city with comfort score and rank"
)
async def get_all_weather(
    weather_service: WeatherService = Depends(get_weather_service),
    user=Depends(require_user),
):
    """
    Get all cities ranked by comfort.

    Cities whose upstream request failed are left out; the rest are always
    scored and ranked. Results are cached for the configured TTL.

    Returns:
        List[CityWeatherResult]: Cities in configured order, each with its rank

    Raises:
        500: Weather source rejected the request for the whole batch
    """
    try:
        results = await weather_service.get_all_cities_weather()
    except WeatherSourceError as e:
        get_logger().error(f"Failed to fetch weather data: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch weather data", "details": str(e)}
        )

    return [CityWeatherResult.from_scored(city) for city in results]


@router.get(
    "/weather/debug/cache-status",
    response_model=CacheStatusResponse,
    summary="Get result cache status",
    description="Whether the last weather request was served from cache"
)
async def get_cache_status(weather_service: WeatherService = Depends(get_weather_service)):
    """Return HIT, MISS or NONE for the most recent cache lookup."""
    return CacheStatusResponse(status=weather_service.get_last_cache_status())

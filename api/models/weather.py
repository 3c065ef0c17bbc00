"""
Pydantic models for weather and comfort-score responses.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from weatherwell.scoring.observation import ScoredCity


class CityWeatherResult(BaseModel):
    """One ranked city, serialized with camelCase keys for the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    city_id: int = Field(..., description="OpenWeatherMap city identifier")
    city_name: str = Field(..., description="City name")
    temperature: float = Field(..., description="Air temperature (°C)")
    humidity: int = Field(..., description="Relative humidity (%)")
    wind_speed: float = Field(..., description="Wind speed (m/s)")
    cloud_percentage: int = Field(..., description="Cloud cover (%)")
    visibility: int = Field(..., description="Visibility (km)")
    pressure: int = Field(..., description="Pressure (hPa)")
    weather_description: str = Field(..., description="Current condition text")
    comfort_score: float = Field(..., ge=0, le=100, description="Comfort score (0-100)")
    rank: int = Field(..., ge=1, description="Rank by comfort score (1 = most comfortable)")

    @classmethod
    def from_scored(cls, city: ScoredCity) -> "CityWeatherResult":
        return cls(**city.to_dict())


class CacheStatusResponse(BaseModel):
    """Status of the last result-cache lookup."""

    status: str = Field(..., description="HIT, MISS or NONE")

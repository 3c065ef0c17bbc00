"""
Observation and scored-city records used by the comfort engine.
"""
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional


def detect_snow(description: str) -> bool:
    """Return True when a free-text weather description mentions snow."""
    return "snow" in (description or "").casefold()


@dataclass(frozen=True)
class WeatherObservation:
    """
    One city's current weather, as delivered by the ingestion boundary.

    Attributes:
        city_id: Upstream city identifier, unique within a fetch cycle
        city_name: Display name of the city
        temperature: Air temperature (°C)
        humidity: Relative humidity (%)
        wind_speed: Wind speed (m/s)
        cloud_percentage: Cloud cover (%)
        visibility: Visibility (km)
        pressure: Sea-level pressure (hPa), informational only
        weather_description: Free-form condition text
        is_snowing: Derived from weather_description at ingestion
    """

    city_id: int
    city_name: str
    temperature: float
    humidity: int
    wind_speed: float
    cloud_percentage: int
    visibility: int
    pressure: int = 0
    weather_description: str = "Unknown"
    is_snowing: Optional[bool] = None

    def __post_init__(self):
        if self.is_snowing is None:
            object.__setattr__(self, "is_snowing", detect_snow(self.weather_description))


@dataclass(frozen=True)
class ScoredCity:
    """An observation with its comfort score and, after ranking, its rank."""

    observation: WeatherObservation
    comfort_score: float
    rank: int = 0

    @property
    def city_id(self) -> int:
        return self.observation.city_id

    @property
    def city_name(self) -> str:
        return self.observation.city_name

    def with_rank(self, rank: int) -> "ScoredCity":
        return replace(self, rank=rank)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a single record (snake_case keys)."""
        data = asdict(self.observation)
        data.pop("is_snowing")
        data["comfort_score"] = self.comfort_score
        data["rank"] = self.rank
        return data

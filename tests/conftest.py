import os
from typing import Any, Dict

import pytest

# Must be set before api.config is imported anywhere
os.environ["WEATHERWELL_CONFIG"] = os.path.join(os.path.dirname(__file__), "fixtures", "api.yaml")

from weatherwell.scoring.observation import WeatherObservation  # noqa: E402


def build_observation(**overrides) -> WeatherObservation:
    """Observation near the comfort optimum; override any field."""
    fields = dict(
        city_id=1,
        city_name="Test",
        temperature=22.0,
        humidity=50,
        wind_speed=3.0,
        cloud_percentage=30,
        visibility=10,
        pressure=1013,
        weather_description="Clear",
    )
    fields.update(overrides)
    return WeatherObservation(**fields)


def build_payload(city_id: int = 1248991, name: str = "Colombo", **overrides) -> Dict[str, Any]:
    """OpenWeatherMap current-weather payload."""
    payload = {
        "coord": {"lon": 79.85, "lat": 6.93},
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds"}],
        "main": {"temp": 28.34, "feels_like": 32.1, "humidity": 78, "pressure": 1009},
        "visibility": 10000,
        "wind": {"speed": 4.12, "deg": 250},
        "clouds": {"all": 75},
        "id": city_id,
        "name": name,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def observation_factory():
    return build_observation


@pytest.fixture
def payload_factory():
    return build_payload

"""
Configuration loading for the API.

Static settings come from config/api.yaml, secrets from the environment
(optionally through a .env file).
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from weatherwell.utils.helpers import load_json, load_yaml
from weatherwell.utils.logger import get_logger

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DEFAULT_CONFIG_PATH = os.path.join(BASE_DIR, "config", "api.yaml")


@dataclass(frozen=True)
class City:
    """A configured city to fetch."""

    city_id: int
    city_name: str


@dataclass(frozen=True)
class Auth0Settings:
    """Identity provider settings read from the environment."""

    domain: Optional[str]
    audience: Optional[str]
    client_id: Optional[str]
    client_secret: Optional[str]

    @classmethod
    def from_env(cls) -> "Auth0Settings":
        return cls(
            domain=os.getenv("AUTH0_DOMAIN") or None,
            audience=os.getenv("AUTH0_AUDIENCE") or None,
            client_id=os.getenv("AUTH0_CLIENT_ID") or None,
            client_secret=os.getenv("AUTH0_CLIENT_SECRET") or None,
        )


@lru_cache()
def load_api_config() -> Dict[str, Any]:
    """
    Load config/api.yaml (or the file named by WEATHERWELL_CONFIG).

    Returns:
        dict: Full configuration with all top-level sections present
    """
    config_path = os.getenv("WEATHERWELL_CONFIG", DEFAULT_CONFIG_PATH)
    config = load_yaml(config_path)

    for section in ("api", "weather", "cache", "scheduler", "auth", "logging"):
        config.setdefault(section, {})
    config["api"].setdefault("cors", {"enabled": False})
    return config


def get_openweather_api_key() -> str:
    return os.getenv("OPENWEATHER_API_KEY", "demo-key")


def resolve_path(path: str) -> str:
    """Resolve a config-relative path against the project root."""
    if os.path.isabs(path):
        return path
    return os.path.join(BASE_DIR, path)


def load_cities(file_path: str, logger=None) -> List[City]:
    """
    Load the fixed city list.

    The file holds {"List": [{"CityCode": "1248991", "CityName": "Colombo"}, ...]}.
    Entries whose code is not an integer are skipped.

    Args:
        file_path: Path to the cities JSON file
        logger: Logger instance

    Returns:
        List of City in file order (empty if the file cannot be read)
    """
    logger = logger or get_logger()

    try:
        data = load_json(resolve_path(file_path))
    except (OSError, ValueError) as e:
        logger.error(f"Error loading {file_path}: {e}")
        return []

    cities = []
    for entry in data.get("List") or []:
        code = entry.get("CityCode")
        name = entry.get("CityName") or str(code)
        try:
            city_id = int(str(code).strip())
        except (TypeError, ValueError):
            logger.warning(f"Skipping city '{name}': invalid city code {code!r}")
            continue
        cities.append(City(city_id=city_id, city_name=name))

    return cities

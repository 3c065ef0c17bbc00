"""
Exception types shared by the ingestion and identity layers.
"""


class WeatherSourceError(Exception):
    """Upstream weather request failed for one city."""

    def __init__(self, message: str, city_id=None, status_code=None):
        super().__init__(message)
        self.city_id = city_id
        self.status_code = status_code


class WeatherSourceAuthError(WeatherSourceError):
    """Upstream rejected the API key. Retrying other cities is pointless."""


class ObservationParseError(WeatherSourceError):
    """Upstream payload could not be mapped to an observation."""


class IdentityProviderError(Exception):
    """Identity provider call failed."""


class IdentityNotConfiguredError(IdentityProviderError):
    """Identity provider settings are missing from the environment."""

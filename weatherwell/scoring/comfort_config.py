"""
Versioned weight and threshold snapshot for the comfort score.

Any change to these numbers changes the scores served to clients, so it must come
with a new `version` tag. The tag is part of the result cache key.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TemperatureRule:
    """Three-tier penalty around the optimal temperature."""

    weight: float = 40.0
    optimal: float = 22.0
    near_band: float = 5.0
    near_divisor: float = 25.0
    mid_band: float = 15.0
    mid_divisor: float = 20.0
    far_divisor: float = 30.0


@dataclass(frozen=True)
class HumidityRule:
    """Humidity score whose weight depends on the air temperature."""

    weight_cold: float = 12.0    # temperature < cold_below
    weight_cool: float = 18.0    # cold_below <= temperature < cool_below
    weight_mild: float = 23.0
    weight_hot: float = 28.0     # temperature > hot_above
    cold_below: float = 5.0
    cool_below: float = 15.0
    hot_above: float = 28.0

    dry_limit: float = 30.0
    dry_floor: float = 0.8
    humid_limit: float = 70.0
    optimal: float = 50.0
    comfort_divisor: float = 40.0
    humid_divisor: float = 25.0


@dataclass(frozen=True)
class WindRule:
    weight: float = 15.0
    optimal_cold: float = 1.0
    optimal_warm: float = 4.0
    cold_below: float = 15.0
    divisor: float = 8.0


@dataclass(frozen=True)
class VisibilityRule:
    weight: float = 12.0
    points_per_km: float = 1.2


@dataclass(frozen=True)
class CloudRule:
    weight: float = 8.0
    optimal: float = 30.0
    divisor: float = 100.0


@dataclass(frozen=True)
class PenaltyRule:
    """Multipliers applied to the summed score; every matching one compounds."""

    freezing_at_or_below: float = 0.0
    freezing: float = 0.65
    heat_above: float = 32.0
    heat: float = 0.70
    snow: float = 0.50
    wind_chill_speed_above: float = 10.0
    wind_chill_temperature_below: float = 10.0
    wind_chill: float = 0.75


@dataclass(frozen=True)
class ComfortConfig:
    """Complete parameter set of one comfort-score algorithm version."""

    version: str = "v3"
    temperature: TemperatureRule = field(default_factory=TemperatureRule)
    humidity: HumidityRule = field(default_factory=HumidityRule)
    wind: WindRule = field(default_factory=WindRule)
    visibility: VisibilityRule = field(default_factory=VisibilityRule)
    cloud: CloudRule = field(default_factory=CloudRule)
    penalties: PenaltyRule = field(default_factory=PenaltyRule)
    min_score: float = 0.0
    max_score: float = 100.0
    decimals: int = 1


DEFAULT_COMFORT_CONFIG = ComfortConfig()

"""
Comfort score calculator.

Maps one weather observation to a 0-100 comfort score:

    temperature  40 pts  three-tier penalty around 22°C
    humidity     12-28   weight depends on temperature
    wind         15 pts  optimum 1 m/s in the cold, 4 m/s otherwise
    visibility   12 pts  1.2 pts per km
    cloud         8 pts  optimum 30 %, zero while snowing

The component sum is multiplied by every matching penalty (freezing, heat, snow,
wind chill), clamped to [0, 100] and rounded half away from zero to 1 decimal.
"""
from typing import Dict, Iterable, List, Optional

from weatherwell.scoring.comfort_config import ComfortConfig, DEFAULT_COMFORT_CONFIG
from weatherwell.scoring.observation import ScoredCity, WeatherObservation
from weatherwell.utils.helpers import clamp, round_half_away


class ScoreCalculator:
    """
    Stateless comfort scorer bound to one configuration snapshot.
    """

    def __init__(self, config: Optional[ComfortConfig] = None):
        self.config = config or DEFAULT_COMFORT_CONFIG

    @property
    def version(self) -> str:
        return self.config.version

    def temperature_score(self, temperature: float) -> float:
        rule = self.config.temperature
        deviation = abs(temperature - rule.optimal)

        if deviation <= rule.near_band:
            return rule.weight * (1 - deviation / rule.near_divisor)
        if deviation <= rule.mid_band:
            return rule.weight * (1 - deviation / rule.mid_divisor)
        return max(0.0, rule.weight * (1 - deviation / rule.far_divisor))

    def humidity_weight(self, temperature: float) -> float:
        rule = self.config.humidity

        if temperature < rule.cold_below:
            return rule.weight_cold
        if temperature < rule.cool_below:
            return rule.weight_cool
        if temperature > rule.hot_above:
            return rule.weight_hot
        return rule.weight_mild

    def humidity_score(self, humidity: float, temperature: float) -> float:
        rule = self.config.humidity
        weight = self.humidity_weight(temperature)

        if humidity <= rule.dry_limit:
            # Dry air costs at most (1 - dry_floor) of the weight
            return weight * (rule.dry_floor + (1 - rule.dry_floor) * (humidity / rule.dry_limit))
        if humidity <= rule.humid_limit:
            return weight * (1 - abs(humidity - rule.optimal) / rule.comfort_divisor)
        return max(0.0, weight * (1 - (humidity - rule.humid_limit) / rule.humid_divisor))

    def wind_score(self, wind_speed: float, temperature: float) -> float:
        rule = self.config.wind
        optimal = rule.optimal_cold if temperature < rule.cold_below else rule.optimal_warm
        return max(0.0, rule.weight * (1 - abs(wind_speed - optimal) / rule.divisor))

    def visibility_score(self, visibility: float) -> float:
        rule = self.config.visibility
        if visibility == 0:
            return 0.0
        return min(rule.weight, visibility * rule.points_per_km)

    def cloud_score(self, cloud_percentage: float, is_snowing: bool) -> float:
        rule = self.config.cloud
        if is_snowing:
            return 0.0
        # Not floored; extreme cover pulls the sum down before the final clamp
        return rule.weight * (1 - abs(cloud_percentage - rule.optimal) / rule.divisor)

    def penalty_multiplier(self, observation: WeatherObservation) -> float:
        rule = self.config.penalties
        multiplier = 1.0

        if observation.temperature <= rule.freezing_at_or_below:
            multiplier *= rule.freezing
        if observation.temperature > rule.heat_above:
            multiplier *= rule.heat
        if observation.is_snowing:
            multiplier *= rule.snow
        if (observation.wind_speed > rule.wind_chill_speed_above
                and observation.temperature < rule.wind_chill_temperature_below):
            multiplier *= rule.wind_chill

        return multiplier

    def breakdown(self, observation: WeatherObservation) -> Dict[str, float]:
        """
        Unrounded component scores and penalty multiplier for one observation.

        Args:
            observation: Weather observation to score

        Returns:
            Dict with one entry per component plus 'penalty_multiplier'
        """
        t = observation.temperature
        return {
            "temperature": self.temperature_score(t),
            "humidity": self.humidity_score(observation.humidity, t),
            "wind": self.wind_score(observation.wind_speed, t),
            "visibility": self.visibility_score(observation.visibility),
            "cloud": self.cloud_score(observation.cloud_percentage, observation.is_snowing),
            "penalty_multiplier": self.penalty_multiplier(observation),
        }

    def calculate_score(self, observation: WeatherObservation) -> float:
        """
        Compute the comfort score of one observation.

        Args:
            observation: Weather observation with finite numeric fields

        Returns:
            Score in [0, 100], rounded to 1 decimal (half away from zero)
        """
        parts = self.breakdown(observation)
        multiplier = parts.pop("penalty_multiplier")
        total = sum(parts.values()) * multiplier

        total = clamp(total, self.config.min_score, self.config.max_score)
        return round_half_away(total, self.config.decimals)

    def score_city(self, observation: WeatherObservation) -> ScoredCity:
        return ScoredCity(observation=observation, comfort_score=self.calculate_score(observation))

    def score_cities(self, observations: Iterable[WeatherObservation]) -> List[ScoredCity]:
        """Score a batch, keeping input order. Ranks are left unset."""
        return [self.score_city(observation) for observation in observations]

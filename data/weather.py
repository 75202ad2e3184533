"""
Weather source abstraction for humidity and wind conditions.

Provides a pluggable interface for live weather integration.
The StubWeatherProvider returns configurable hardcoded values
for development and testing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from config import DEFAULT_WIND_SPEED_UNIT, FALLBACK_WEATHER
from triage.types import WeatherConditions

logger = logging.getLogger(__name__)


class WeatherProvider(ABC):
    """Abstract base class for weather data sources."""

    @abstractmethod
    def get_current_conditions(self, lat: float, lon: float) -> WeatherConditions:
        """Return current conditions at a location.

        Args:
            lat: Latitude in degrees.
            lon: Longitude in degrees.
        """
        ...


class StubWeatherProvider(WeatherProvider):
    """Configurable stub that returns hardcoded conditions.

    Args:
        humidity: Relative humidity (%).
        temperature: Temperature (deg C).
        wind_speed: Wind speed in ``wind_speed_unit``.
        wind_direction: Wind direction (degrees from north).
        wind_speed_unit: Unit of ``wind_speed``.
    """

    def __init__(
        self,
        humidity: float = FALLBACK_WEATHER["humidity"],
        temperature: float = FALLBACK_WEATHER["temperature"],
        wind_speed: Optional[float] = FALLBACK_WEATHER["wind_speed"],
        wind_direction: Optional[float] = FALLBACK_WEATHER["wind_direction"],
        wind_speed_unit: str = DEFAULT_WIND_SPEED_UNIT,
    ):
        self.humidity = humidity
        self.temperature = temperature
        self.wind_speed = wind_speed
        self.wind_direction = wind_direction
        self.wind_speed_unit = wind_speed_unit

    def get_current_conditions(self, lat: float, lon: float) -> WeatherConditions:
        return WeatherConditions(
            humidity=self.humidity,
            temperature=self.temperature,
            wind_speed=self.wind_speed,
            wind_direction=self.wind_direction,
            wind_speed_unit=self.wind_speed_unit,
        )


def fallback_conditions() -> WeatherConditions:
    """Conditions used when no weather source is reachable."""
    return WeatherConditions(
        humidity=FALLBACK_WEATHER["humidity"],
        temperature=FALLBACK_WEATHER["temperature"],
        wind_speed=FALLBACK_WEATHER["wind_speed"],
        wind_direction=FALLBACK_WEATHER["wind_direction"],
        wind_speed_unit=DEFAULT_WIND_SPEED_UNIT,
    )


def get_conditions_with_fallback(
    provider: WeatherProvider,
    lat: float,
    lon: float,
    fallback: Optional[WeatherConditions] = None,
) -> Tuple[WeatherConditions, bool]:
    """
    Query a provider, substituting fallback conditions if it fails.

    Returns:
        (conditions, used_fallback)
    """
    try:
        return provider.get_current_conditions(lat, lon), False
    except (OSError, ValueError) as exc:
        logger.warning(
            "Weather lookup failed at (%.4f, %.4f), using fallback conditions: %s",
            lat, lon, exc,
        )
        return (fallback or fallback_conditions()), True

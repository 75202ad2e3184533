"""
Pathogen-to-plume mapping.

Turns a scored pathogen's epidemiology (R0, transmission vector) plus live
weather into dispersion-model inputs:

    emission rate = clamp(2.5 * R0 * ln(R0 + 1), 0.1, 100) g/s
    stack height  = 5 m for airborne, 2 m for fluid transmission

The mapper never raises; questionable inputs fall back to defaults with a
warning, and ``check_plume_parameters`` reports remaining issues as data.
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import List, Tuple

from config import (
    AIRBORNE_STACK_HEIGHT,
    DEFAULT_SOURCE_LAT_LON,
    DEFAULT_WIND_DIRECTION,
    DEFAULT_WIND_SPEED,
    FLUID_STACK_HEIGHT,
    MAPPED_STABILITY_CLASS,
    MAX_EMISSION_RATE,
    MAX_STACK_HEIGHT,
    MIN_EMISSION_RATE,
    R0_TO_EMISSION_MULTIPLIER,
    STABILITY_CLASSES,
    WIND_SPEED_UNIT_TO_MS,
)
from models.gaussian_plume import PlumeParameters
from triage.types import EnhancedPathogenScore, PathogenScore, WeatherConditions

logger = logging.getLogger(__name__)


@dataclass
class PlumeValidation:
    """Outcome of ``check_plume_parameters``."""

    is_valid: bool
    issues: List[str] = field(default_factory=list)


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _finite(value) -> bool:
    return _is_number(value) and math.isfinite(value)


def map_r0_to_emission_rate(r0: float) -> float:
    """
    Map a basic reproduction number to an emission rate (g/s).

    Logarithmic scaling keeps very contagious pathogens from dominating;
    invalid R0 (non-numeric, NaN, negative) maps to the minimum rate.
    """
    if not _is_number(r0) or math.isnan(r0) or r0 < 0:
        logger.warning("Invalid R0 score %r, using minimum emission rate", r0)
        return MIN_EMISSION_RATE

    raw = R0_TO_EMISSION_MULTIPLIER * r0 * math.log(r0 + 1) if math.isfinite(r0) else MAX_EMISSION_RATE
    rate = max(MIN_EMISSION_RATE, min(MAX_EMISSION_RATE, raw))
    logger.debug("Mapped R0 %.3g to emission rate %.2f g/s", r0, rate)
    return rate


def map_transmission_vector_to_stack_height(vector: str) -> float:
    """Airborne pathogens release elevated, fluid-borne ones near the ground."""
    key = vector.strip().lower() if isinstance(vector, str) else None
    if key == "air":
        return AIRBORNE_STACK_HEIGHT
    if key == "fluid":
        return FLUID_STACK_HEIGHT
    logger.warning(
        "Unknown transmission vector %r, using fluid transmission height", vector
    )
    return FLUID_STACK_HEIGHT


def incorporate_wind_data(weather: WeatherConditions) -> Tuple[float, float]:
    """
    Wind speed (m/s) and direction (degrees) from weather conditions.

    Speed is converted from ``weather.wind_speed_unit``. Missing, non-numeric
    or unusable readings fall back to DEFAULT_WIND_SPEED and
    DEFAULT_WIND_DIRECTION independently. Directions are wrapped into [0, 360).
    """
    wind_speed = DEFAULT_WIND_SPEED
    raw_speed = getattr(weather, "wind_speed", None)
    unit = getattr(weather, "wind_speed_unit", None)
    factor = WIND_SPEED_UNIT_TO_MS.get(unit.strip().lower() if isinstance(unit, str) else unit)

    if raw_speed is not None:
        if factor is None:
            logger.warning("Unknown wind speed unit %r, using default wind speed", unit)
        elif not _finite(raw_speed) or raw_speed <= 0:
            logger.warning("Unusable wind speed %r, using default wind speed", raw_speed)
        else:
            wind_speed = raw_speed * factor

    wind_direction = DEFAULT_WIND_DIRECTION
    raw_direction = getattr(weather, "wind_direction", None)
    if raw_direction is not None:
        if _finite(raw_direction):
            wind_direction = float(raw_direction) % 360.0
            # tiny negatives round up to exactly 360.0
            if wind_direction >= 360.0:
                wind_direction = 0.0
        else:
            logger.warning("Unusable wind direction %r, using default", raw_direction)

    logger.debug("Wind data: speed=%.1f m/s, direction=%.0f deg", wind_speed, wind_direction)
    return wind_speed, wind_direction


def _source_location(source_lat_lon) -> Tuple[float, float]:
    if isinstance(source_lat_lon, (tuple, list)) and len(source_lat_lon) == 2:
        return source_lat_lon[0], source_lat_lon[1]
    logger.warning("Malformed source location %r, using default", source_lat_lon)
    return DEFAULT_SOURCE_LAT_LON


def create_pathogen_to_plume_mapping(
    score: EnhancedPathogenScore,
    weather: WeatherConditions,
    source_lat_lon: Tuple[float, float],
) -> PlumeParameters:
    """
    Build plume parameters for a scored pathogen.

    Args:
        score: Scored pathogen with R0 and transmission vector.
        weather: Current conditions (wind is taken from here).
        source_lat_lon: (latitude, longitude) of the release point.

    Returns:
        PlumeParameters with the neutral stability class. Not validated;
        pass the result to ``check_plume_parameters``.
    """
    emission_rate = map_r0_to_emission_rate(getattr(score, "r0_score", None))
    stack_height = map_transmission_vector_to_stack_height(
        getattr(score, "transmission_vector", None)
    )
    wind_speed, wind_direction = incorporate_wind_data(weather)
    source_lat, source_lon = _source_location(source_lat_lon)

    params = PlumeParameters(
        source_lon=source_lon,
        source_lat=source_lat,
        emission_rate=emission_rate,
        wind_speed=wind_speed,
        wind_direction=wind_direction,
        stack_height=stack_height,
        stability_class=MAPPED_STABILITY_CLASS,
    )
    logger.info(
        "Plume parameters for %s: Q=%.2f g/s, H=%.1f m, u=%.1f m/s, dir=%.0f deg",
        getattr(score, "pathogen_name", "?"), emission_rate, stack_height,
        wind_speed, wind_direction,
    )
    return params


def check_plume_parameters(params: PlumeParameters) -> PlumeValidation:
    """Check mapped parameters against physical and geographic bounds."""
    issues: List[str] = []

    q = params.emission_rate
    if not _finite(q):
        issues.append(f"Emission rate {q} is not a finite number")
    elif q < MIN_EMISSION_RATE:
        issues.append(f"Emission rate {q} is below minimum {MIN_EMISSION_RATE}")
    elif q > MAX_EMISSION_RATE:
        issues.append(f"Emission rate {q} exceeds maximum {MAX_EMISSION_RATE}")

    h = params.stack_height
    if not _finite(h):
        issues.append(f"Stack height {h} is not a finite number")
    elif h < 0:
        issues.append(f"Stack height {h} cannot be negative")
    elif h > MAX_STACK_HEIGHT:
        issues.append(f"Stack height {h} is unrealistically high (>{MAX_STACK_HEIGHT:g}m)")

    u = params.wind_speed
    if not _finite(u) or u <= 0:
        issues.append(f"Wind speed {u} must be positive")

    d = params.wind_direction
    if not _finite(d) or not 0 <= d < 360:
        issues.append(f"Wind direction {d} must be in [0, 360) degrees")

    lat = params.source_lat
    if not _finite(lat) or not -90 <= lat <= 90:
        issues.append(f"Source latitude {lat} must be between -90 and 90")
    lon = params.source_lon
    if not _finite(lon) or not -180 <= lon <= 180:
        issues.append(f"Source longitude {lon} must be between -180 and 180")

    sc = params.stability_class
    if not isinstance(sc, str) or sc.upper() not in STABILITY_CLASSES:
        issues.append(f"Stability class {sc!r} must be one of {', '.join(STABILITY_CLASSES)}")

    if issues:
        logger.warning("Plume parameters have %d issue(s): %s", len(issues), "; ".join(issues))
    return PlumeValidation(is_valid=not issues, issues=issues)


def to_enhanced_pathogen_score(record, score: PathogenScore) -> EnhancedPathogenScore:
    """Attach a pathogen record's epidemiology to its triage score."""
    return EnhancedPathogenScore(
        pathogen_id=score.pathogen_id,
        pathogen_name=score.pathogen_name,
        score=score.score,
        is_viable=score.is_viable,
        r0_score=record.r0_score,
        transmission_vector=record.transmission_vector,
        incubation_period=record.incubation_period,
        min_humidity_survival=record.min_humidity_survival,
    )

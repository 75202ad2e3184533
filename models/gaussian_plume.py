"""
Gaussian Plume Dispersion Model.

Implements the steady-state Gaussian plume equation for a continuous point
source with Briggs rural dispersion coefficients, evaluated at ground level:

    C(x, y) = Q / (2*pi*u*sigma_y*sigma_z) *
              exp(-y^2 / (2*sigma_y^2)) * exp(-(z - H)^2 / (2*sigma_z^2))

Convention:
  - x is the downwind distance, y the crosswind distance (meters).
  - Emission rate in g/s, concentrations in g/m^3.
  - Wind direction is the bearing of the downwind axis (degrees from north).
"""

import dataclasses
import logging
import math
import numbers
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np

from config import (
    CROSSWIND_SIGMA_FACTOR,
    DEFAULT_GRID_RESOLUTION,
    DEFAULT_MAX_DISTANCE_M,
    DEFAULT_STABILITY_CLASS,
    MAX_EXPONENT,
    MIN_CONCENTRATION,
    RECEPTOR_HEIGHT_M,
    STABILITY_CLASSES,
)
from models.coordinate_transform import cartesian_to_geographic
from models.dispersion import (
    DispersionCoefficientCache,
    DispersionCoefficients,
    calculate_dispersion_coefficients,
)
from models.errors import InvalidInputError, OutOfBoundsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlumeParameters:
    """
    One dispersion scenario.

    Construction does not validate: use ``validate_plume_parameters`` (raises)
    or ``triage.plume_mapping.check_plume_parameters`` (returns issues).

    Args:
        source_lon: Source longitude in degrees, [-180, 180].
        source_lat: Source latitude in degrees, [-90, 90].
        emission_rate: Emission rate Q in g/s (>= 0).
        wind_speed: Wind speed u in m/s (> 0).
        wind_direction: Bearing of the downwind axis, degrees in [0, 360).
        stack_height: Effective release height H in meters (>= 0).
        stability_class: Pasquill-Gifford class A-F.
    """

    source_lon: float
    source_lat: float
    emission_rate: float
    wind_speed: float
    wind_direction: float
    stack_height: float
    stability_class: str = DEFAULT_STABILITY_CLASS

    @property
    def source_lat_lon(self):
        return self.source_lat, self.source_lon

    def replace(self, **changes) -> "PlumeParameters":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class ConcentrationPoint:
    """A sampled concentration in both the plume frame and geographic frame."""

    x: float
    y: float
    concentration: float
    lat: float
    lon: float


def _finite(value) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_plume_parameters(params: PlumeParameters) -> None:
    """
    Check a PlumeParameters value against its physical and geographic bounds.

    Raises:
        InvalidInputError: On the first violated bound.
    """
    if not _finite(params.source_lat) or not -90.0 <= params.source_lat <= 90.0:
        raise InvalidInputError(
            f"Source latitude must be between -90 and 90 degrees, got {params.source_lat}"
        )
    if not _finite(params.source_lon) or not -180.0 <= params.source_lon <= 180.0:
        raise InvalidInputError(
            f"Source longitude must be between -180 and 180 degrees, got {params.source_lon}"
        )
    if not _finite(params.emission_rate) or params.emission_rate < 0:
        raise InvalidInputError(
            f"Emission rate must be non-negative, got {params.emission_rate}"
        )
    if not _finite(params.wind_speed) or params.wind_speed <= 0:
        raise InvalidInputError(f"Wind speed must be positive, got {params.wind_speed}")
    if not _finite(params.wind_direction) or not 0.0 <= params.wind_direction < 360.0:
        raise InvalidInputError(
            f"Wind direction must be in [0, 360) degrees, got {params.wind_direction}"
        )
    if not _finite(params.stack_height) or params.stack_height < 0:
        raise InvalidInputError(
            f"Stack height must be non-negative, got {params.stack_height}"
        )
    if (
        not isinstance(params.stability_class, str)
        or params.stability_class.upper() not in STABILITY_CLASSES
    ):
        raise InvalidInputError(
            f"Invalid stability class: {params.stability_class}. Use A-F."
        )


def _crosswind_profile(
    y: np.ndarray,
    z: float,
    params: PlumeParameters,
    coeffs: DispersionCoefficients,
) -> np.ndarray:
    """Evaluate the plume equation at one downwind distance for crosswind offsets y."""
    sy = coeffs.sigma_y
    sz = coeffs.sigma_z
    H = params.stack_height

    norm = params.emission_rate / (2.0 * np.pi * params.wind_speed * sy * sz)

    lateral_arg = np.clip(-(y ** 2) / (2.0 * sy ** 2), -MAX_EXPONENT, MAX_EXPONENT)
    vertical_arg = np.clip(-((z - H) ** 2) / (2.0 * sz ** 2), -MAX_EXPONENT, MAX_EXPONENT)

    with np.errstate(over="ignore", invalid="ignore"):
        concentration = norm * np.exp(lateral_arg) * np.exp(vertical_arg)

    return np.where(
        np.isfinite(concentration) & (concentration >= MIN_CONCENTRATION),
        concentration,
        0.0,
    )


def calculate_concentration(
    x: float,
    y: float,
    z: float,
    params: PlumeParameters,
    coeffs: DispersionCoefficients,
) -> float:
    """
    Concentration at one receptor.

    Args:
        x: Downwind distance (meters). Upwind and at-source receptors get 0.
        y: Crosswind distance (meters).
        z: Receptor height (meters).
        params: Plume scenario.
        coeffs: Dispersion coefficients evaluated at x.

    Returns:
        Concentration in g/m^3; exactly 0.0 below MIN_CONCENTRATION.
    """
    if x <= 0 or params.emission_rate == 0:
        return 0.0
    return float(_crosswind_profile(np.asarray(y, dtype=float), z, params, coeffs))


def generate_concentration_grid(
    params: PlumeParameters,
    grid_resolution: int = DEFAULT_GRID_RESOLUTION,
    max_distance: float = DEFAULT_MAX_DISTANCE_M,
    cache: Optional[DispersionCoefficientCache] = None,
    concentration_threshold: float = MIN_CONCENTRATION,
    receptor_height: float = RECEPTOR_HEIGHT_M,
) -> List[ConcentrationPoint]:
    """
    Sample the plume over a cone-shaped region downwind of the source.

    Row i (1..N) sits at x = i * max_distance / N. Each row spans
    +/- CROSSWIND_SIGMA_FACTOR * sigma_y(x) crosswind with N + 1 samples, so
    the sampled region widens with the plume. Rows with a zero centerline
    are skipped; points at or below ``concentration_threshold`` are dropped.

    Args:
        params: Plume scenario (validated here).
        grid_resolution: Number of downwind rows N (positive integer).
        max_distance: Furthest downwind distance sampled (meters, > 0).
        cache: Optional dispersion coefficient cache owned by the caller.
        concentration_threshold: Minimum concentration kept in the output.
        receptor_height: Receptor height z (meters).

    Returns:
        Unordered list of ConcentrationPoint.

    Raises:
        InvalidInputError: Invalid parameters, resolution or distance.
    """
    validate_plume_parameters(params)
    if (
        isinstance(grid_resolution, bool)
        or not isinstance(grid_resolution, (int, np.integer))
        or grid_resolution <= 0
    ):
        raise InvalidInputError(
            f"Grid resolution must be a positive integer, got {grid_resolution!r}"
        )
    if not _finite(max_distance) or max_distance <= 0:
        raise InvalidInputError(f"Max distance must be positive, got {max_distance}")

    if cache is not None:
        cache.ensure_stability_class(params.stability_class)

    n = int(grid_resolution)
    dx = max_distance / n
    points: List[ConcentrationPoint] = []
    skipped = 0

    if params.emission_rate == 0:
        return points

    for i in range(1, n + 1):
        x = i * dx
        coeffs = calculate_dispersion_coefficients(x, params.stability_class, cache)

        centerline = calculate_concentration(x, 0.0, receptor_height, params, coeffs)
        if centerline <= 0:
            continue

        half_width = CROSSWIND_SIGMA_FACTOR * coeffs.sigma_y
        ys = np.linspace(-half_width, half_width, n + 1)
        row = _crosswind_profile(ys, receptor_height, params, coeffs)

        for y, conc in zip(ys, row):
            if conc <= concentration_threshold:
                continue
            try:
                lat, lon = cartesian_to_geographic(
                    x, float(y), params.source_lat_lon, params.wind_direction
                )
            except OutOfBoundsError:
                skipped += 1
                continue
            points.append(ConcentrationPoint(
                x=x, y=float(y), concentration=float(conc), lat=lat, lon=lon,
            ))

    if skipped:
        logger.debug("Skipped %d out-of-bounds concentration points", skipped)
    logger.info(
        "Generated %d concentration points (class %s, Q=%.3g g/s, u=%.3g m/s)",
        len(points), params.stability_class.upper(), params.emission_rate, params.wind_speed,
    )
    return points


def field_max_concentration(points: Sequence[Union[ConcentrationPoint, object]]) -> float:
    """Largest finite concentration in a field, or 0.0 for an empty field."""
    best = 0.0
    for p in points:
        c = getattr(p, "concentration", None)
        if _finite(c) and c > best:
            best = float(c)
    return best

"""
Environmental viability filter.

A pathogen is viable when the current relative humidity lies inside its
survival range, both bounds inclusive.
"""

import math
import numbers

from models.errors import InvalidInputError


def _is_percentage(value) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and 0.0 <= value <= 100.0
    )


def validate_humidity(humidity: float) -> None:
    """Raise InvalidInputError unless humidity is a percentage in [0, 100]."""
    if not _is_percentage(humidity):
        raise InvalidInputError(
            f"Humidity must be between 0 and 100 percent, got {humidity}"
        )


def validate_survival_bounds(min_humidity: float, max_humidity: float) -> None:
    """Raise InvalidInputError unless 0 <= min_humidity <= max_humidity <= 100."""
    if not _is_percentage(min_humidity):
        raise InvalidInputError(
            f"Minimum survival humidity must be between 0 and 100, got {min_humidity}"
        )
    if not _is_percentage(max_humidity):
        raise InvalidInputError(
            f"Maximum survival humidity must be between 0 and 100, got {max_humidity}"
        )
    if min_humidity > max_humidity:
        raise InvalidInputError(
            f"Minimum survival humidity ({min_humidity}) cannot exceed "
            f"maximum survival humidity ({max_humidity})"
        )


def validate_survival_range(survival_range) -> None:
    """Validate any object exposing ``min_humidity`` and ``max_humidity``."""
    validate_survival_bounds(
        getattr(survival_range, "min_humidity", None),
        getattr(survival_range, "max_humidity", None),
    )


def is_pathogen_viable(humidity: float, survival_range) -> bool:
    """
    Whether a pathogen survives at the given humidity.

    Args:
        humidity: Relative humidity percentage, [0, 100].
        survival_range: Object with ``min_humidity`` and ``max_humidity``.

    Returns:
        True iff min_humidity <= humidity <= max_humidity.

    Raises:
        InvalidInputError: Humidity or range outside [0, 100], or min > max.
    """
    validate_humidity(humidity)
    validate_survival_range(survival_range)
    return survival_range.min_humidity <= humidity <= survival_range.max_humidity

"""
Dispersion Coefficient Calculator.

Computes horizontal (sigma_y) and vertical (sigma_z) spread parameters of
the Gaussian plume with the Briggs rural formulas for Pasquill-Gifford
stability classes A (very unstable) to F (stable):

    sigma_y = a * x * (1 + 0.0001 x)^b
    sigma_z = a * x                     classes A, B
    sigma_z = a * x * (1 + b x)^c       classes C-F

Results are memoized in an explicitly owned DispersionCoefficientCache.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from config import (
    BRIGGS_RURAL_COEFFICIENTS,
    CACHE_DISTANCE_DECIMALS,
    DISPERSION_CACHE_MAX_ENTRIES,
    SIGMA_FLOOR_M,
    SIGMA_Y_DISTANCE_FACTOR,
)
from models.errors import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispersionCoefficients:
    """Spread of the Gaussian profile at one downwind distance.

    Args:
        sigma_y: Horizontal dispersion coefficient (meters, > 0).
        sigma_z: Vertical dispersion coefficient (meters, > 0).
    """

    sigma_y: float
    sigma_z: float


CacheKey = Tuple[float, str]


class DispersionCoefficientCache:
    """Bounded memo table for dispersion coefficients with FIFO eviction.

    Keys are (distance rounded to centimeters, stability class).  Clearing
    is always safe because the coefficients are a pure function of the key;
    ``ensure_stability_class`` clears the table whenever the caller switches
    to a different class so stale rows never accumulate.

    Lookups, writes and clears are serialized by a lock, so the hit and
    miss counters stay exact under concurrent use.

    Args:
        max_size: Maximum number of cached entries (> 0).
    """

    def __init__(self, max_size: int = DISPERSION_CACHE_MAX_ENTRIES):
        if max_size <= 0:
            raise InvalidInputError(f"Cache size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries: Dict[CacheKey, DispersionCoefficients] = {}
        self._lock = threading.Lock()
        self._stability_class: Optional[str] = None
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(distance: float, stability_class: str) -> CacheKey:
        return round(distance, CACHE_DISTANCE_DECIMALS), stability_class.upper()

    def get(self, key: CacheKey) -> Optional[DispersionCoefficients]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
        return value

    def put(self, key: CacheKey, value: DispersionCoefficients) -> None:
        with self._lock:
            if key in self._entries:
                return
            while len(self._entries) >= self.max_size:
                # dicts preserve insertion order: the first key is the oldest
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def ensure_stability_class(self, stability_class: str) -> None:
        """Clear the table if ``stability_class`` differs from the last one used."""
        sc = stability_class.upper()
        if self._stability_class is not None and sc != self._stability_class:
            logger.debug(
                "Stability class changed %s -> %s, clearing %d cached coefficients",
                self._stability_class, sc, len(self._entries),
            )
            self.clear()
        self._stability_class = sc

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries


def _get_briggs_coeffs(stability_class: str) -> dict:
    """Return the Briggs rural coefficient row for a stability class."""
    if not isinstance(stability_class, str) or stability_class.upper() not in BRIGGS_RURAL_COEFFICIENTS:
        raise InvalidInputError(f"Invalid stability class: {stability_class}. Use A-F.")
    return BRIGGS_RURAL_COEFFICIENTS[stability_class.upper()]


def compute_sigma(distance: float, stability_class: str) -> DispersionCoefficients:
    """
    Evaluate the Briggs rural formulas without caching.

    Args:
        distance: Downwind distance in meters (> 0).
        stability_class: Pasquill-Gifford class A-F.

    Returns:
        DispersionCoefficients, both floored at SIGMA_FLOOR_M.
    """
    coeffs = _get_briggs_coeffs(stability_class)
    a_y, b_y = coeffs["sigma_y"]
    a_z, b_z, c_z = coeffs["sigma_z"]
    x = distance

    sigma_y = a_y * x * math.pow(1.0 + SIGMA_Y_DISTANCE_FACTOR * x, b_y)

    if b_z is None:
        sigma_z = a_z * x
    else:
        sigma_z = a_z * x * math.pow(1.0 + b_z * x, c_z)

    return DispersionCoefficients(
        sigma_y=max(sigma_y, SIGMA_FLOOR_M),
        sigma_z=max(sigma_z, SIGMA_FLOOR_M),
    )


def calculate_dispersion_coefficients(
    distance: float,
    stability_class: str,
    cache: Optional[DispersionCoefficientCache] = None,
) -> DispersionCoefficients:
    """
    Return (sigma_y, sigma_z) for a downwind distance and stability class.

    When a cache is supplied the result is computed at the rounded key
    distance, so a cached and an uncached lookup of the same key agree.

    Args:
        distance: Downwind distance in meters (must be > 0).
        stability_class: Pasquill-Gifford class A-F (case-insensitive).
        cache: Optional memo table owned by the caller.

    Returns:
        DispersionCoefficients in meters.

    Raises:
        InvalidInputError: Non-positive or non-finite distance, unknown class.
    """
    if isinstance(distance, bool) or not isinstance(distance, (int, float)) or not math.isfinite(distance):
        raise InvalidInputError(f"Downwind distance must be a finite number, got {distance!r}")
    if distance <= 0:
        raise InvalidInputError(f"Downwind distance must be positive, got {distance}")
    _get_briggs_coeffs(stability_class)

    if cache is None:
        return compute_sigma(distance, stability_class)

    key = cache.make_key(distance, stability_class)
    cached = cache.get(key)
    if cached is not None:
        return cached

    rounded = key[0]
    result = compute_sigma(rounded if rounded > 0 else distance, stability_class)
    cache.put(key, result)
    return result

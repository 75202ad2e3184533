"""
Coordinate transforms between the plume frame and geographic coordinates.

Convention:
  - x is the downwind distance, y the crosswind distance (meters).
  - The downwind axis points along the bearing given by the wind direction
    (degrees clockwise from north), so x rotates into (northing, easting)
    through the wind-direction angle.
  - Geographic points are (latitude, longitude) in decimal degrees.
"""

import math
import numbers
from typing import Tuple

from config import EARTH_RADIUS_M
from models.errors import OutOfBoundsError


def _is_finite_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _valid_latitude(lat: float) -> bool:
    return _is_finite_number(lat) and -90.0 <= lat <= 90.0


def _valid_longitude(lon: float) -> bool:
    return _is_finite_number(lon) and -180.0 <= lon <= 180.0


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180]; values already in range are unchanged."""
    if -180.0 <= lon <= 180.0:
        return lon
    return ((lon + 180.0) % 360.0) - 180.0


def validate_coordinates(lat: float, lon: float) -> bool:
    """Return True if (lat, lon) is a valid geographic point. Never raises."""
    return _valid_latitude(lat) and _valid_longitude(lon)


def apply_wind_rotation(x: float, y: float, wind_direction: float) -> Tuple[float, float]:
    """
    Rotate plume-frame offsets into (northing, easting) meters.

        [northing]   [cos(t)  -sin(t)] [x]
        [easting ] = [sin(t)   cos(t)] [y]

    Args:
        x: Downwind distance (meters).
        y: Crosswind distance (meters).
        wind_direction: Degrees from north.

    Returns:
        (northing, easting) in meters.
    """
    theta = math.radians(wind_direction)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    northing = cos_t * x - sin_t * y
    easting = sin_t * x + cos_t * y
    return northing, easting


def cartesian_to_geographic(
    x: float,
    y: float,
    source_lat_lon: Tuple[float, float],
    wind_direction: float,
    earth_radius: float = EARTH_RADIUS_M,
) -> Tuple[float, float]:
    """
    Convert plume-frame offsets to a geographic point.

    Latitude shift uses the great-circle approximation dlat = northing / R.
    Longitude shift uses the mean of source and destination latitude for the
    cosine correction: dlon = easting / (R * cos(mean_lat)).

    Args:
        x: Downwind distance from the source (meters).
        y: Crosswind distance from the plume centerline (meters).
        source_lat_lon: (latitude, longitude) of the source in degrees.
        wind_direction: Wind direction in degrees from north, [0, 360).
        earth_radius: Sphere radius in meters.

    Returns:
        (latitude, longitude) in decimal degrees.

    Raises:
        OutOfBoundsError: If the source, the wind direction, the offsets or
            the resulting point are outside their valid ranges.
    """
    source_lat, source_lon = source_lat_lon

    if not _valid_latitude(source_lat):
        raise OutOfBoundsError(
            f"Invalid source latitude: {source_lat}. Must be between -90 and 90 degrees."
        )
    if not _valid_longitude(source_lon):
        raise OutOfBoundsError(
            f"Invalid source longitude: {source_lon}. Must be between -180 and 180 degrees."
        )
    if not _is_finite_number(wind_direction) or not 0.0 <= wind_direction < 360.0:
        raise OutOfBoundsError(
            f"Invalid wind direction: {wind_direction}. Must be in [0, 360) degrees."
        )
    if not (_is_finite_number(x) and _is_finite_number(y)):
        raise OutOfBoundsError(f"Plume offsets must be finite, got x={x}, y={y}.")

    northing, easting = apply_wind_rotation(x, y, wind_direction)

    source_lat_rad = math.radians(source_lat)
    new_lat_rad = source_lat_rad + northing / earth_radius
    new_lat = math.degrees(new_lat_rad)
    if not -90.0 <= new_lat <= 90.0:
        raise OutOfBoundsError(
            f"Calculated latitude {new_lat} is out of valid bounds [-90, 90]."
        )

    cos_mean_lat = math.cos((source_lat_rad + new_lat_rad) / 2.0)
    if abs(cos_mean_lat) < 1e-12:
        if easting != 0.0:
            raise OutOfBoundsError(
                f"Longitude is undefined at the pole (mean latitude "
                f"{math.degrees((source_lat_rad + new_lat_rad) / 2.0)})."
            )
        delta_lon = 0.0
    else:
        delta_lon = math.degrees(easting / (earth_radius * cos_mean_lat))

    new_lon = normalize_longitude(source_lon + delta_lon)
    if not _valid_longitude(new_lon):
        raise OutOfBoundsError(
            f"Calculated longitude {new_lon} is out of valid bounds [-180, 180]."
        )

    return new_lat, new_lon


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    earth_radius: float = EARTH_RADIUS_M,
) -> float:
    """
    Great-circle distance between two points (Haversine).

    Returns:
        Distance in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (math.sin(dphi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return earth_radius * c

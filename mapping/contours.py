"""
Contour Polygon Extraction.

Turns a scattered concentration field into closed iso-concentration rings:

1. Inverse-distance-weighted interpolation onto a regular lat/lon grid whose
   outer ring of nodes lies one step outside the samples and is pinned to
   zero, so every contour closes inside the grid.
2. Marching squares per threshold (16 corner configurations, saddles
   resolved by the cell mean).
3. Stitching of cell segments into rings by endpoint matching.
4. Douglas-Peucker simplification of oversized rings.
5. Display style from the threshold's ratio to the field maximum.

Extraction never raises on bad samples; malformed points are discarded and
degenerate fields simply yield fewer polygons.
"""

import logging
import math
import numbers
from collections import deque
from collections.abc import Iterable as IterableABC
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from config import (
    ADAPTIVE_THRESHOLD_FRACTIONS,
    CONCENTRATION_STYLES,
    DEFAULT_GRID_RESOLUTION,
    DEFAULT_MAX_DISTANCE_M,
    DEFAULT_MAX_POLYGON_POINTS,
    DEFAULT_SIMPLIFICATION_TOLERANCE,
    EARTH_RADIUS_M,
    EDGE_FLAT_TOLERANCE,
    IDW_COINCIDENT_DISTANCE_M,
    IDW_SEARCH_RADIUS_M,
    MAX_CONTOUR_GRID_RESOLUTION,
    MIN_CONTOUR_GRID_RESOLUTION,
    MIN_RING_VERTICES,
    SEGMENT_MATCH_TOLERANCE_DEG,
)
from mapping.simplify import simplify_polygon

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]
Segment = Tuple[LatLon, LatLon]

# Smallest bounding-box extent (degrees) used when all samples share a row or column
MIN_GRID_SPAN_DEG = 1e-4


@dataclass
class ContourConfig:
    """
    Contour extraction settings.

    Args:
        thresholds: Explicit concentration levels; None selects adaptive levels.
        grid_resolution: Interpolation grid nodes per side, clamped to [4, 50].
        max_distance: Samples further downwind than this (meters) are ignored.
        max_polygon_points: Rings with more vertices are simplified.
        simplification_tolerance: Douglas-Peucker tolerance in degrees.
    """

    thresholds: Optional[Sequence[float]] = None
    grid_resolution: int = DEFAULT_GRID_RESOLUTION
    max_distance: float = DEFAULT_MAX_DISTANCE_M
    max_polygon_points: int = DEFAULT_MAX_POLYGON_POINTS
    simplification_tolerance: float = DEFAULT_SIMPLIFICATION_TOLERANCE


@dataclass(frozen=True)
class PlumePolygon:
    """A closed iso-concentration ring with display hints."""

    coordinates: Tuple[LatLon, ...]
    concentration_level: float
    color: str
    opacity: float

    @property
    def vertex_count(self) -> int:
        return len(self.coordinates)

    def is_closed(self, tolerance: float = SEGMENT_MATCH_TOLERANCE_DEG) -> bool:
        if len(self.coordinates) < 2:
            return False
        return _close(self.coordinates[0], self.coordinates[-1], tolerance)


@dataclass(frozen=True)
class _SamplePoint:
    lat: float
    lon: float
    concentration: float


def _finite(value) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _close(a: LatLon, b: LatLon, tolerance: float) -> bool:
    return abs(a[0] - b[0]) <= tolerance and abs(a[1] - b[1]) <= tolerance


def _clean_points(points: Iterable, max_distance: Optional[float] = None) -> List[Tuple[float, float, float]]:
    """Return (lat, lon, concentration) for every well-formed sample."""
    cleaned = []
    for p in () if points is None else points:
        lat = getattr(p, "lat", None)
        lon = getattr(p, "lon", None)
        conc = getattr(p, "concentration", None)
        if not (_finite(lat) and _finite(lon) and _finite(conc)):
            continue
        if conc < 0 or not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            continue
        x = getattr(p, "x", None)
        if max_distance is not None and _finite(x) and x > max_distance:
            continue
        cleaned.append((float(lat), float(lon), float(conc)))
    return cleaned


def choose_thresholds(
    max_concentration: float,
    thresholds: Optional[Sequence[float]] = None,
) -> List[float]:
    """
    Contour levels for a field, ascending.

    Without explicit thresholds, fixed fractions of the maximum are used.
    Explicit thresholds that are non-finite, non-positive or above the
    maximum are discarded. A thresholds value that is not a collection of
    numbers yields no levels.
    """
    if not _finite(max_concentration) or max_concentration <= 0:
        return []
    if thresholds is not None and (
        isinstance(thresholds, (str, bytes)) or not isinstance(thresholds, IterableABC)
    ):
        logger.warning("Ignoring malformed contour thresholds %r", thresholds)
        return []
    if thresholds is None:
        candidates = [f * max_concentration for f in ADAPTIVE_THRESHOLD_FRACTIONS]
    else:
        candidates = [float(t) for t in thresholds if _finite(t)]
    return sorted({t for t in candidates if 0 < t <= max_concentration})


def get_visualization_properties(
    concentration_level: float,
    max_concentration: float,
) -> Tuple[str, float]:
    """Map a threshold's ratio to the field maximum to (color, opacity)."""
    ratio = concentration_level / max_concentration if max_concentration > 0 else 0.0
    for upper_bound, color, opacity in CONCENTRATION_STYLES:
        if ratio < upper_bound:
            return color, opacity
    _, color, opacity = CONCENTRATION_STYLES[-1]
    return color, opacity


def _clamp_resolution(resolution) -> int:
    if not _finite(resolution):
        return MAX_CONTOUR_GRID_RESOLUTION
    return int(min(max(int(resolution), MIN_CONTOUR_GRID_RESOLUTION), MAX_CONTOUR_GRID_RESOLUTION))


def _grid_axis(lo: float, hi: float, resolution: int) -> np.ndarray:
    """Node coordinates: resolution - 2 interior nodes spanning [lo, hi], plus one padding node each side."""
    if hi - lo < MIN_GRID_SPAN_DEG:
        mid = (lo + hi) / 2.0
        lo, hi = mid - MIN_GRID_SPAN_DEG / 2.0, mid + MIN_GRID_SPAN_DEG / 2.0
    step = (hi - lo) / (resolution - 3)
    return lo + step * (np.arange(resolution) - 1)


def interpolate_regular_grid(
    points: Sequence,
    resolution: int = DEFAULT_GRID_RESOLUTION,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Inverse-distance-weighted interpolation of scattered samples onto a grid.

    Weights are 1/d^2 over samples within max(IDW_SEARCH_RADIUS_M, two cell
    diagonals); a node within IDW_COINCIDENT_DISTANCE_M of a sample takes
    that sample's value. Nodes with no sample in range are zero.

    Args:
        points: ConcentrationPoint-like objects (lat, lon, concentration).
        resolution: Nodes per side, clamped to [4, 50].

    Returns:
        (lats, lons, values) where values[i, j] belongs to (lats[i], lons[j]).
        Empty arrays if there are no usable samples.
    """
    samples = _clean_points(points)
    if not samples:
        return np.array([]), np.array([]), np.zeros((0, 0))

    res = _clamp_resolution(resolution)
    data = np.asarray(samples, dtype=float)
    lats = _grid_axis(data[:, 0].min(), data[:, 0].max(), res)
    lons = _grid_axis(data[:, 1].min(), data[:, 1].max(), res)

    # Local equirectangular projection (meters) around the grid center
    lat0 = math.radians(float(lats.mean()))
    m_per_deg_lat = math.radians(1.0) * EARTH_RADIUS_M
    m_per_deg_lon = m_per_deg_lat * max(math.cos(lat0), 1e-12)

    def project(lat, lon):
        return np.column_stack(((lat - lats[0]) * m_per_deg_lat, (lon - lons[0]) * m_per_deg_lon))

    sample_xy = project(data[:, 0], data[:, 1])
    values_at_samples = data[:, 2]
    tree = cKDTree(sample_xy)

    cell_diagonal = math.hypot(
        (lats[1] - lats[0]) * m_per_deg_lat,
        (lons[1] - lons[0]) * m_per_deg_lon,
    )
    radius = max(IDW_SEARCH_RADIUS_M, 2.0 * cell_diagonal)

    grid_lat, grid_lon = np.meshgrid(lats[1:-1], lons[1:-1], indexing="ij")
    node_xy = project(grid_lat.ravel(), grid_lon.ravel())
    neighbours = tree.query_ball_point(node_xy, r=radius)

    interior = np.zeros(len(node_xy))
    for k, idx in enumerate(neighbours):
        if not idx:
            continue
        idx = np.asarray(idx, dtype=int)
        d = np.hypot(*(sample_xy[idx] - node_xy[k]).T)
        nearest = int(np.argmin(d))
        if d[nearest] < IDW_COINCIDENT_DISTANCE_M:
            interior[k] = values_at_samples[idx[nearest]]
            continue
        w = 1.0 / d ** 2
        interior[k] = float(np.sum(w * values_at_samples[idx]) / np.sum(w))

    values = np.zeros((res, res))
    values[1:-1, 1:-1] = interior.reshape(res - 2, res - 2)
    return lats, lons, values


def _edge_point(
    lats: np.ndarray,
    lons: np.ndarray,
    values: np.ndarray,
    a: Tuple[int, int],
    b: Tuple[int, int],
    threshold: float,
) -> LatLon:
    """Threshold crossing on the edge between nodes a and b, in canonical node order."""
    if b < a:
        a, b = b, a
    va = values[a]
    vb = values[b]
    if abs(vb - va) < EDGE_FLAT_TOLERANCE:
        t = 0.5
    else:
        t = min(max((threshold - va) / (vb - va), 0.0), 1.0)
    lat = lats[a[0]] + t * (lats[b[0]] - lats[a[0]])
    lon = lons[a[1]] + t * (lons[b[1]] - lons[a[1]])
    return float(lat), float(lon)


# Edges of a cell, named by side; "top" is the higher latitude row.
_TOP, _RIGHT, _BOTTOM, _LEFT = "top", "right", "bottom", "left"

# Corner bits: top-left 8, top-right 4, bottom-right 2, bottom-left 1.
_CASE_EDGES = {
    0: (),
    1: ((_LEFT, _BOTTOM),),
    2: ((_BOTTOM, _RIGHT),),
    3: ((_LEFT, _RIGHT),),
    4: ((_TOP, _RIGHT),),
    6: ((_TOP, _BOTTOM),),
    7: ((_LEFT, _TOP),),
    8: ((_LEFT, _TOP),),
    9: ((_TOP, _BOTTOM),),
    11: ((_TOP, _RIGHT),),
    12: ((_LEFT, _RIGHT),),
    13: ((_BOTTOM, _RIGHT),),
    14: ((_LEFT, _BOTTOM),),
    15: (),
}


def _saddle_edges(case: int, mean_above: bool):
    if case == 5:
        if mean_above:
            return (_LEFT, _TOP), (_BOTTOM, _RIGHT)
        return (_LEFT, _BOTTOM), (_TOP, _RIGHT)
    # case 10
    if mean_above:
        return (_LEFT, _BOTTOM), (_TOP, _RIGHT)
    return (_LEFT, _TOP), (_BOTTOM, _RIGHT)


def extract_contour_segments(
    lats: np.ndarray,
    lons: np.ndarray,
    values: np.ndarray,
    threshold: float,
) -> List[Segment]:
    """
    Marching squares over a regular grid.

    Args:
        lats, lons: Node coordinates (ascending).
        values: Node values, values[i, j] at (lats[i], lons[j]).
        threshold: Iso-level; a corner is "above" when value >= threshold.

    Returns:
        List of ((lat, lon), (lat, lon)) segments, zero-length ones removed.
    """
    segments: List[Segment] = []
    n_rows, n_cols = values.shape if values.ndim == 2 else (0, 0)

    for i in range(n_rows - 1):
        for j in range(n_cols - 1):
            bl, br = (i, j), (i, j + 1)
            tl, tr = (i + 1, j), (i + 1, j + 1)
            v_tl, v_tr, v_br, v_bl = values[tl], values[tr], values[br], values[bl]

            case = (
                (8 if v_tl >= threshold else 0)
                | (4 if v_tr >= threshold else 0)
                | (2 if v_br >= threshold else 0)
                | (1 if v_bl >= threshold else 0)
            )
            if case in (0, 15):
                continue

            if case in (5, 10):
                mean_above = (v_tl + v_tr + v_br + v_bl) / 4.0 >= threshold
                edge_pairs = _saddle_edges(case, mean_above)
            else:
                edge_pairs = _CASE_EDGES[case]

            edges = {
                _TOP: (tl, tr),
                _RIGHT: (tr, br),
                _BOTTOM: (bl, br),
                _LEFT: (tl, bl),
            }
            for e1, e2 in edge_pairs:
                p1 = _edge_point(lats, lons, values, *edges[e1], threshold)
                p2 = _edge_point(lats, lons, values, *edges[e2], threshold)
                if p1 != p2:
                    segments.append((p1, p2))

    return segments


def _bucket(point: LatLon, tolerance: float) -> Tuple[int, int]:
    return math.floor(point[0] / tolerance), math.floor(point[1] / tolerance)


def connect_segments(
    segments: Sequence[Segment],
    tolerance: float = SEGMENT_MATCH_TOLERANCE_DEG,
) -> List[List[LatLon]]:
    """
    Stitch segments into closed rings by matching endpoints.

    Segments are consumed from a worklist; each chain is grown forward and
    then backward through an endpoint index bucketed by ``tolerance``.
    Chains that cannot form a ring of at least MIN_RING_VERTICES vertices
    (closing vertex included) are dropped.
    """
    index: Dict[Tuple[int, int], List[Tuple[int, int]]] = {}
    for s, seg in enumerate(segments):
        for end in (0, 1):
            index.setdefault(_bucket(seg[end], tolerance), []).append((s, end))

    remaining = set(range(len(segments)))

    def take_match(point: LatLon) -> Optional[LatLon]:
        """Consume a remaining segment touching ``point``; return its far endpoint."""
        bi, bj = _bucket(point, tolerance)
        for di in (-1, 0, 1):
            for dj in (-1, 0, 1):
                for s, end in index.get((bi + di, bj + dj), ()):
                    if s in remaining and _close(segments[s][end], point, tolerance):
                        remaining.discard(s)
                        return segments[s][1 - end]
        return None

    rings: List[List[LatLon]] = []
    for start in range(len(segments)):
        if start not in remaining:
            continue
        remaining.discard(start)
        chain = deque(segments[start])

        while not _close(chain[-1], chain[0], tolerance):
            nxt = take_match(chain[-1])
            if nxt is None:
                break
            chain.append(nxt)

        if not _close(chain[-1], chain[0], tolerance):
            while True:
                prev = take_match(chain[0])
                if prev is None:
                    break
                chain.appendleft(prev)
                if _close(chain[-1], chain[0], tolerance):
                    break

        ring: List[LatLon] = []
        for p in chain:
            if not ring or not _close(ring[-1], p, tolerance):
                ring.append(p)
        if len(ring) > 1 and not _close(ring[0], ring[-1], tolerance):
            ring.append(ring[0])
        elif len(ring) > 1:
            ring[-1] = ring[0]

        if len(ring) >= MIN_RING_VERTICES:
            rings.append(ring)

    return rings


def generate_contour_polygons(
    points: Sequence,
    config: Optional[ContourConfig] = None,
) -> List[PlumePolygon]:
    """
    Extract styled iso-concentration rings from a scattered field.

    Args:
        points: ConcentrationPoint-like samples; malformed ones are ignored.
        config: Extraction settings (defaults when None).

    Returns:
        Polygons sorted by concentration level ascending; empty when the
        field has no positive concentration or the inputs cannot be used.
    """
    try:
        return _extract_polygons(points, config if config is not None else ContourConfig())
    except (AttributeError, TypeError, ValueError) as exc:
        logger.warning("Contour extraction failed, returning no polygons: %s", exc)
        return []


def _extract_polygons(points: Sequence, config: ContourConfig) -> List[PlumePolygon]:
    samples = _clean_points(points, config.max_distance if _finite(config.max_distance) else None)
    if not samples:
        return []

    max_concentration = max(c for _, _, c in samples)
    if max_concentration <= 0:
        return []

    thresholds = choose_thresholds(max_concentration, config.thresholds)
    if not thresholds:
        return []

    positive = [_SamplePoint(lat, lon, c) for lat, lon, c in samples]
    lats, lons, values = interpolate_regular_grid(positive, config.grid_resolution)

    max_points = config.max_polygon_points if _finite(config.max_polygon_points) else DEFAULT_MAX_POLYGON_POINTS
    tolerance = (
        config.simplification_tolerance
        if _finite(config.simplification_tolerance) and config.simplification_tolerance > 0
        else DEFAULT_SIMPLIFICATION_TOLERANCE
    )

    polygons: List[PlumePolygon] = []
    for threshold in thresholds:
        segments = extract_contour_segments(lats, lons, values, threshold)
        color, opacity = get_visualization_properties(threshold, max_concentration)
        for ring in connect_segments(segments):
            if len(ring) > max_points:
                ring = simplify_polygon(ring, tolerance)
            if len(ring) < MIN_RING_VERTICES:
                continue
            polygons.append(PlumePolygon(
                coordinates=tuple(ring),
                concentration_level=threshold,
                color=color,
                opacity=opacity,
            ))

    polygons.sort(key=lambda p: p.concentration_level)
    logger.debug(
        "Extracted %d contour polygons at %d levels from %d samples",
        len(polygons), len(thresholds), len(samples),
    )
    return polygons


"""
Douglas-Peucker polyline and ring simplification.

Points are (lat, lon) pairs treated as planar coordinates; the tolerance is
expressed in the same units (degrees).
"""

import math
from typing import List, Sequence, Tuple

from config import MIN_RING_VERTICES

Point = Tuple[float, float]


def perpendicular_distance(point: Point, start: Point, end: Point) -> float:
    """
    Distance from ``point`` to the infinite line through ``start`` and ``end``.

    Falls back to the point-to-point distance when start and end coincide.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = math.hypot(dx, dy)
    if length == 0.0:
        return math.hypot(point[0] - start[0], point[1] - start[1])
    cross = dx * (start[1] - point[1]) - dy * (start[0] - point[0])
    return abs(cross) / length


def douglas_peucker(points: Sequence[Point], tolerance: float) -> List[Point]:
    """
    Simplify an open polyline, keeping both endpoints.

    Iterative: an explicit stack of (start, end) index ranges replaces the
    usual recursion so long rings cannot hit the recursion limit.
    """
    n = len(points)
    if n < 3:
        return list(points)

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]

    while stack:
        first, last = stack.pop()
        max_dist = -1.0
        index = first
        for i in range(first + 1, last):
            d = perpendicular_distance(points[i], points[first], points[last])
            if d > max_dist:
                max_dist = d
                index = i
        if max_dist > tolerance:
            keep[index] = True
            stack.append((first, index))
            stack.append((index, last))

    return [p for p, k in zip(points, keep) if k]


def simplify_polygon(ring: Sequence[Point], tolerance: float) -> List[Point]:
    """
    Simplify a closed ring (first vertex == last vertex).

    The ring is split at the vertex farthest from its first vertex and each
    half is simplified separately, so the anchor line of neither half is
    degenerate.

    Args:
        ring: Closed ring of (lat, lon) vertices.
        tolerance: Maximum deviation in degrees.

    Returns:
        The simplified closed ring. It may hold fewer than MIN_RING_VERTICES
        vertices when the tolerance collapses the ring; callers drop such
        rings. The input is returned unchanged if simplification would
        add vertices.
    """
    ring = list(ring)
    if len(ring) <= MIN_RING_VERTICES or tolerance <= 0:
        return ring

    closed = ring[0] == ring[-1]
    body = ring[:-1] if closed else ring

    origin = body[0]
    split = max(
        range(1, len(body)),
        key=lambda i: math.hypot(body[i][0] - origin[0], body[i][1] - origin[1]),
    )

    first_half = douglas_peucker(body[:split + 1], tolerance)
    second_half = douglas_peucker(body[split:] + [origin], tolerance)
    simplified = first_half[:-1] + second_half

    if len(simplified) > len(ring):
        return ring
    return simplified

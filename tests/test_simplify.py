"""Tests for Douglas-Peucker ring simplification."""

import math

import pytest

from mapping.simplify import douglas_peucker, perpendicular_distance, simplify_polygon


def _circle(n, radius=1.0):
    ring = [(radius * math.cos(2 * math.pi * k / n), radius * math.sin(2 * math.pi * k / n)) for k in range(n)]
    return ring + [ring[0]]


class TestPerpendicularDistance:
    def test_distance_to_horizontal_line(self):
        assert perpendicular_distance((1.0, 1.0), (0.0, 0.0), (2.0, 0.0)) == pytest.approx(1.0)

    def test_point_on_line(self):
        assert perpendicular_distance((5.0, 5.0), (0.0, 0.0), (1.0, 1.0)) == pytest.approx(0.0)

    def test_degenerate_line_uses_point_distance(self):
        assert perpendicular_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(5.0)


class TestDouglasPeucker:
    def test_collinear_points_removed(self):
        line = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
        assert douglas_peucker(line, 0.1) == [(0.0, 0.0), (3.0, 0.0)]

    def test_spike_kept(self):
        line = [(0.0, 0.0), (1.0, 0.0), (2.0, 5.0), (3.0, 0.0), (4.0, 0.0)]
        result = douglas_peucker(line, 0.5)
        assert (2.0, 5.0) in result
        assert result[0] == line[0] and result[-1] == line[-1]

    def test_short_input_unchanged(self):
        assert douglas_peucker([(0.0, 0.0), (1.0, 1.0)], 1.0) == [(0.0, 0.0), (1.0, 1.0)]

    def test_long_line_does_not_recurse(self):
        """A long zig-zag is handled without hitting the recursion limit."""
        line = [(float(i), float(i % 2)) for i in range(1500)]
        result = douglas_peucker(line, 0.1)
        assert len(result) == len(line)


class TestSimplifyPolygon:
    def test_dense_circle_reduced(self):
        ring = _circle(200)
        result = simplify_polygon(ring, 0.01)
        assert 4 <= len(result) < len(ring)
        assert result[0] == result[-1]

    def test_collinear_square_edges_removed(self):
        ring = [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2), (2, 1), (2, 0), (1, 0), (0, 0)]
        result = simplify_polygon(ring, 0.01)
        assert result == [(0, 0), (0, 2), (2, 2), (2, 0), (0, 0)]

    def test_collapsed_ring_returned_short(self):
        """A tolerance that flattens the ring leaves fewer than four vertices."""
        ring = _circle(50)
        result = simplify_polygon(ring, 100.0)
        assert len(result) == 3
        assert result[0] == result[-1] == ring[0]

    @pytest.mark.parametrize("tolerance", [1e-6, 1e-3, 0.05, 0.3])
    def test_never_increases_vertex_count(self, tolerance):
        ring = _circle(120)
        result = simplify_polygon(ring, tolerance)
        assert len(result) <= len(ring)
        assert len(result) >= 4

    def test_small_ring_unchanged(self):
        ring = [(0, 0), (0, 1), (1, 1), (0, 0)]
        assert simplify_polygon(ring, 10.0) == ring

"""Tests for the Gaussian plume concentration field."""

import logging
import math

import pytest

from models.coordinate_transform import calculate_distance
from models.dispersion import calculate_dispersion_coefficients
from models.errors import InvalidInputError
from models.gaussian_plume import (
    ConcentrationPoint,
    calculate_concentration,
    field_max_concentration,
    generate_concentration_grid,
    validate_plume_parameters,
)


class TestValidatePlumeParameters:
    """Tests for hard parameter validation."""

    def test_valid_parameters_pass(self, plume_params):
        validate_plume_parameters(plume_params)

    @pytest.mark.parametrize("field, value, message", [
        ("wind_speed", 0.0, "Wind speed"),
        ("wind_speed", -1.0, "Wind speed"),
        ("emission_rate", -0.1, "Emission rate"),
        ("emission_rate", float("nan"), "Emission rate"),
        ("wind_direction", 360.0, "Wind direction"),
        ("stack_height", -1.0, "Stack height"),
        ("source_lat", 95.0, "latitude"),
        ("source_lon", -181.0, "longitude"),
        ("stability_class", "G", "stability class"),
    ])
    def test_invalid_parameters_raise(self, plume_params, field, value, message):
        with pytest.raises(InvalidInputError, match=message):
            validate_plume_parameters(plume_params.replace(**{field: value}))

    def test_zero_emission_is_valid(self, plume_params):
        validate_plume_parameters(plume_params.replace(emission_rate=0.0))

    def test_parameters_are_immutable(self, plume_params):
        with pytest.raises(AttributeError):
            plume_params.emission_rate = 5.0


class TestCalculateConcentration:
    """Tests for the point-wise plume equation."""

    def test_matches_closed_form(self, plume_params):
        x, y = 500.0, 20.0
        c = calculate_dispersion_coefficients(x, "D")
        H = plume_params.stack_height
        expected = (
            plume_params.emission_rate
            / (2 * math.pi * plume_params.wind_speed * c.sigma_y * c.sigma_z)
            * math.exp(-y ** 2 / (2 * c.sigma_y ** 2))
            * math.exp(-H ** 2 / (2 * c.sigma_z ** 2))
        )
        assert calculate_concentration(x, y, 0.0, plume_params, c) == pytest.approx(expected)

    @pytest.mark.parametrize("x", [0.0, -10.0, -1000.0])
    def test_zero_at_or_upwind_of_source(self, plume_params, x):
        c = calculate_dispersion_coefficients(100.0, "D")
        assert calculate_concentration(x, 0.0, 0.0, plume_params, c) == 0.0

    def test_zero_emission_gives_zero(self, plume_params):
        c = calculate_dispersion_coefficients(100.0, "D")
        params = plume_params.replace(emission_rate=0.0)
        assert calculate_concentration(100.0, 0.0, 0.0, params, c) == 0.0

    def test_symmetric_crosswind(self, plume_params):
        c = calculate_dispersion_coefficients(800.0, "D")
        left = calculate_concentration(800.0, -40.0, 0.0, plume_params, c)
        right = calculate_concentration(800.0, 40.0, 0.0, plume_params, c)
        assert left == pytest.approx(right)

    def test_far_crosswind_rounds_to_zero(self, plume_params):
        """Negligible values are exactly zero, never NaN or denormal noise."""
        c = calculate_dispersion_coefficients(100.0, "D")
        value = calculate_concentration(100.0, 1e6, 0.0, plume_params, c)
        assert value == 0.0

    def test_extreme_inputs_stay_finite(self, plume_params):
        c = calculate_dispersion_coefficients(1e-6, "F")
        value = calculate_concentration(1e-6, 1e3, 0.0, plume_params.replace(stack_height=1e4), c)
        assert math.isfinite(value)
        assert value >= 0.0


class TestGenerateConcentrationGrid:
    """Tests for the adaptive cone walk."""

    def test_points_are_positive_and_downwind(self, plume_params, dispersion_cache):
        points = generate_concentration_grid(plume_params, 20, 2000.0, cache=dispersion_cache)
        assert points
        assert all(p.concentration > 0 for p in points)
        assert all(0 < p.x <= 2000.0 for p in points)

    def test_rows_at_regular_steps(self, plume_params):
        points = generate_concentration_grid(plume_params, 10, 1000.0)
        xs = sorted({round(p.x, 6) for p in points})
        assert set(xs) <= {round(100.0 * i, 6) for i in range(1, 11)}

    def test_crosswind_cone_bounded_by_four_sigma(self, plume_params):
        points = generate_concentration_grid(plume_params, 10, 1000.0)
        for p in points:
            sy = calculate_dispersion_coefficients(p.x, "D").sigma_y
            assert abs(p.y) <= 4.0 * sy + 1e-9

    def test_no_duplicate_offsets(self, plume_params):
        points = generate_concentration_grid(plume_params, 16, 1600.0)
        keys = [(p.x, p.y) for p in points]
        assert len(keys) == len(set(keys))

    def test_geographic_position_consistent(self, plume_params, source_lat_lon):
        """Points lie about sqrt(x^2 + y^2) from the source, east of it."""
        points = generate_concentration_grid(plume_params, 10, 1000.0)
        for p in points[:: max(1, len(points) // 20)]:
            d = calculate_distance(source_lat_lon[0], source_lat_lon[1], p.lat, p.lon)
            assert d == pytest.approx(math.hypot(p.x, p.y), abs=1.0)
            assert p.lon > source_lat_lon[1]

    def test_zero_emission_returns_empty(self, plume_params):
        assert generate_concentration_grid(plume_params.replace(emission_rate=0.0), 10, 1000.0) == []

    def test_threshold_drops_low_points(self, plume_params):
        all_points = generate_concentration_grid(plume_params, 10, 1000.0)
        cutoff = field_max_concentration(all_points) / 2
        kept = generate_concentration_grid(plume_params, 10, 1000.0, concentration_threshold=cutoff)
        assert 0 < len(kept) < len(all_points)
        assert all(p.concentration > cutoff for p in kept)

    def test_uses_and_populates_cache(self, plume_params, dispersion_cache):
        generate_concentration_grid(plume_params, 10, 1000.0, cache=dispersion_cache)
        assert len(dispersion_cache) == 10
        generate_concentration_grid(plume_params, 10, 1000.0, cache=dispersion_cache)
        assert dispersion_cache.hits >= 10

    def test_stability_change_clears_cache(self, plume_params, dispersion_cache):
        generate_concentration_grid(plume_params, 10, 1000.0, cache=dispersion_cache)
        generate_concentration_grid(plume_params.replace(stability_class="B"), 5, 1000.0, cache=dispersion_cache)
        assert len(dispersion_cache) == 5

    @pytest.mark.parametrize("resolution", [0, -3, 2.5, True, "10"])
    def test_invalid_resolution_raises(self, plume_params, resolution):
        with pytest.raises(InvalidInputError, match="Grid resolution"):
            generate_concentration_grid(plume_params, resolution, 1000.0)

    @pytest.mark.parametrize("distance", [0.0, -100.0, float("inf")])
    def test_invalid_max_distance_raises(self, plume_params, distance):
        with pytest.raises(InvalidInputError, match="Max distance"):
            generate_concentration_grid(plume_params, 10, distance)

    def test_invalid_parameters_raise(self, plume_params):
        with pytest.raises(InvalidInputError, match="Wind speed"):
            generate_concentration_grid(plume_params.replace(wind_speed=0.0), 10, 1000.0)

    def test_out_of_bounds_points_skipped(self, plume_params, caplog):
        """Near the pole some samples cannot be placed; they are skipped quietly."""
        params = plume_params.replace(source_lat=89.999, source_lon=0.0, wind_direction=0.0)
        with caplog.at_level(logging.DEBUG, logger="models.gaussian_plume"):
            points = generate_concentration_grid(params, 10, 1000.0)
        assert all(-90.0 <= p.lat <= 90.0 for p in points)
        assert "out-of-bounds" in caplog.text

    def test_logs_summary(self, plume_params, caplog):
        with caplog.at_level(logging.INFO, logger="models.gaussian_plume"):
            generate_concentration_grid(plume_params, 5, 500.0)
        assert "concentration points" in caplog.text


class TestFieldMax:
    def test_empty_field(self):
        assert field_max_concentration([]) == 0.0

    def test_ignores_non_finite(self):
        points = [
            ConcentrationPoint(1.0, 0.0, 2.0, 0.0, 0.0),
            ConcentrationPoint(1.0, 1.0, float("nan"), 0.0, 0.0),
            ConcentrationPoint(1.0, 2.0, 5.0, 0.0, 0.0),
        ]
        assert field_max_concentration(points) == 5.0

    def test_peak_is_near_source_on_centreline(self, plume_params):
        points = generate_concentration_grid(plume_params, 20, 2000.0)
        peak = max(points, key=lambda p: p.concentration)
        assert peak.concentration == field_max_concentration(points)
        assert peak.y == pytest.approx(0.0, abs=1e-9)
        assert peak.x == min(p.x for p in points)

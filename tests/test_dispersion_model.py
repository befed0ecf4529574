"""
Dispersion engine tests.

Validates the ground-level concentration grid against the closed-form
Gaussian plume equation, plus the calm-wind, upwind and fallback rules.
"""

import logging
import math

import numpy as np
import pytest

from co2sim.core.dispersion_model import (
    DEFAULT_STACK_HEIGHT,
    MIN_WIND_SPEED,
    generate_concentration_grid,
    ground_level_concentration,
)
from co2sim.core.emission_model import EmissionSource
from co2sim.core.stability import get_sigma

GRID_SIZE = 50
CELL_SIZE = 24.0


def closed_form(q, u, x, y, h, stability_class):
    sigma_y, sigma_z = get_sigma(x, stability_class)
    return (
        q / (math.pi * u * sigma_y * sigma_z)
        * math.exp(-0.5 * (y / sigma_y) ** 2)
        * math.exp(-0.5 * (h / sigma_z) ** 2)
    )


class TestGroundLevelConcentration:

    def test_matches_plume_equation(self):
        sigma_y, sigma_z = get_sigma(300.0, 'C')
        value = ground_level_concentration(2.0, 3.0, sigma_y, sigma_z, 15.0, 40.0)
        assert value == pytest.approx(closed_form(2.0, 3.0, 300.0, 15.0, 40.0, 'C'), rel=1e-12)

    def test_peak_on_centreline(self):
        sigma_y, sigma_z = get_sigma(200.0, 'D')
        centre = ground_level_concentration(1.0, 5.0, sigma_y, sigma_z, 0.0, 20.0)
        off_axis = ground_level_concentration(1.0, 5.0, sigma_y, sigma_z, 48.0, 20.0)
        assert centre > off_axis > 0


class TestGenerateConcentrationGrid:

    def test_shape_and_dtype(self, unit_source):
        grid = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        assert grid.shape == (GRID_SIZE, GRID_SIZE)
        assert grid.dtype == np.float64

    def test_empty_sources_give_zero_grid(self):
        grid = generate_concentration_grid([], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        assert grid.shape == (GRID_SIZE, GRID_SIZE)
        assert not grid.any()

    def test_none_sources_give_zero_grid(self):
        grid = generate_concentration_grid(None, 10, CELL_SIZE, 5.0, 'D')
        assert not grid.any()

    def test_golden_value(self, unit_source):
        grid = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        # Row 25 is the centreline (y = 0), column 4 is x = 96 m
        expected = closed_form(1.0, 5.0, 96.0, 0.0, 20.0, 'D')
        assert grid[25, 4] == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize('stability_class', ['A', 'B', 'C', 'D', 'E', 'F'])
    def test_values_non_negative_and_finite(self, unit_source, stability_class):
        grid = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 2.0, stability_class)
        assert np.all(np.isfinite(grid))
        assert np.all(grid >= 0)

    def test_first_column_is_zero(self, unit_source):
        # x = 0 at the grid edge: both sigmas vanish and the cell contributes nothing
        grid = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        assert np.all(grid[:, 0] == 0)
        assert np.all(grid[:, 1:].max(axis=0) > 0)

    def test_zero_wind_equals_minimum_wind(self, unit_source):
        calm = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 0, 'D')
        slow = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, MIN_WIND_SPEED, 'D')
        assert np.array_equal(calm, slow)

    def test_concentration_inversely_proportional_to_wind(self, unit_source):
        slow = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 2.0, 'D')
        fast = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 4.0, 'D')
        np.testing.assert_allclose(slow, 2 * fast, rtol=1e-12, atol=1e-300)

    def test_unknown_class_equals_neutral(self, unit_source, caplog):
        neutral = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        with caplog.at_level(logging.WARNING):
            fallback = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'Q')
        assert np.array_equal(neutral, fallback)
        assert 'Unknown stability class' in caplog.text

    def test_superposition(self, unit_source, sample_sources):
        sources = [unit_source] + sample_sources
        combined = generate_concentration_grid(sources, GRID_SIZE, CELL_SIZE, 5.0, 'C')
        separate = sum(
            generate_concentration_grid([s], GRID_SIZE, CELL_SIZE, 5.0, 'C') for s in sources
        )
        np.testing.assert_allclose(combined, separate, rtol=1e-12, atol=1e-300)

    def test_source_position_does_not_move_plume(self):
        here = EmissionSource(name='a', x=0, y=0, emission_rate=100, height=30)
        there = EmissionSource(name='b', x=700, y=900, emission_rate=100, height=30)
        np.testing.assert_array_equal(
            generate_concentration_grid([here], 20, CELL_SIZE, 5.0, 'D'),
            generate_concentration_grid([there], 20, CELL_SIZE, 5.0, 'D'),
        )

    def test_missing_height_uses_default_stack(self):
        no_height = EmissionSource(name='a', emission_rate=500, height=0)
        default = EmissionSource(name='b', emission_rate=500, height=DEFAULT_STACK_HEIGHT)
        np.testing.assert_array_equal(
            generate_concentration_grid([no_height], 20, CELL_SIZE, 5.0, 'D'),
            generate_concentration_grid([default], 20, CELL_SIZE, 5.0, 'D'),
        )

    def test_nan_height_uses_default_stack(self):
        nan_height = EmissionSource(name='a', emission_rate=500, height=float('nan'))
        default = EmissionSource(name='b', emission_rate=500, height=DEFAULT_STACK_HEIGHT)
        grid = generate_concentration_grid([nan_height], 20, CELL_SIZE, 5.0, 'D')
        assert np.all(np.isfinite(grid))
        np.testing.assert_array_equal(
            grid, generate_concentration_grid([default], 20, CELL_SIZE, 5.0, 'D')
        )

    def test_accepts_object_array_of_sources(self, unit_source, sample_sources):
        sources = [unit_source] + sample_sources
        np.testing.assert_array_equal(
            generate_concentration_grid(np.array(sources, dtype=object), 20, CELL_SIZE, 5.0, 'C'),
            generate_concentration_grid(sources, 20, CELL_SIZE, 5.0, 'C'),
        )

    def test_symmetric_about_centre_row(self, unit_source):
        grid = generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D')
        # Row 25 - k and row 25 + k are equally far from the centreline
        for k in range(1, 10):
            np.testing.assert_allclose(grid[25 - k], grid[25 + k], rtol=1e-12, atol=1e-300)

    def test_zero_grid_size(self, unit_source):
        grid = generate_concentration_grid([unit_source], 0, CELL_SIZE, 5.0, 'D')
        assert grid.shape == (0, 0)

    def test_scales_with_emission_rate(self, unit_source):
        double = EmissionSource(name='double', emission_rate=7200.0, height=20.0)
        np.testing.assert_allclose(
            generate_concentration_grid([double], GRID_SIZE, CELL_SIZE, 5.0, 'D'),
            2 * generate_concentration_grid([unit_source], GRID_SIZE, CELL_SIZE, 5.0, 'D'),
            rtol=1e-12, atol=1e-300,
        )

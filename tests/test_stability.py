"""
Stability parameter table tests.

Covers the power-law dispersion coefficients, the fallback to neutral
stability and array evaluation.
"""

import logging

import numpy as np
import pytest

from co2sim.core.stability import (
    DEFAULT_STABILITY_CLASS,
    STABILITY_CLASSES,
    STABILITY_LABELS,
    StabilityParams,
    get_sigma,
    get_stability_params,
    resolve_stability_class,
)


class TestStabilityTable:

    def test_six_fixed_classes(self):
        assert list(STABILITY_CLASSES) == ['A', 'B', 'C', 'D', 'E', 'F']
        assert set(STABILITY_LABELS) == set(STABILITY_CLASSES)

    def test_neutral_parameters(self):
        assert STABILITY_CLASSES['D'] == StabilityParams(ay=0.11, by=0.71, az=0.08, bz=0.9)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            STABILITY_CLASSES['G'] = StabilityParams(1, 1, 1, 1)

    def test_plume_spread_narrows_with_stability(self):
        ays = [STABILITY_CLASSES[c].ay for c in 'ABCDEF']
        azs = [STABILITY_CLASSES[c].az for c in 'ABCDEF']
        assert ays == sorted(ays, reverse=True)
        assert azs == sorted(azs, reverse=True)


class TestResolveStabilityClass:

    @pytest.mark.parametrize('cls', ['A', 'B', 'C', 'D', 'E', 'F'])
    def test_known_classes_pass_through(self, cls):
        assert resolve_stability_class(cls) == cls

    @pytest.mark.parametrize('cls', ['G', 'd', '', None, 3])
    def test_unknown_classes_fall_back_to_neutral(self, cls, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_stability_class(cls) == DEFAULT_STABILITY_CLASS == 'D'
        assert 'Unknown stability class' in caplog.text

    def test_get_stability_params_fallback(self):
        assert get_stability_params('Z') is STABILITY_CLASSES['D']


class TestGetSigma:

    def test_neutral_closed_form(self):
        sigma_y, sigma_z = get_sigma(100, 'D')
        assert sigma_y == 0.11 * 100 ** 0.71
        assert sigma_z == 0.08 * 100 ** 0.9

    def test_zero_distance_gives_zero(self):
        assert get_sigma(0, 'A') == (0.0, 0.0)

    def test_unknown_class_matches_neutral(self):
        assert get_sigma(250.0, 'unknown') == get_sigma(250.0, 'D')

    def test_array_input(self):
        x = np.array([24.0, 96.0, 480.0])
        sigma_y, sigma_z = get_sigma(x, 'B')
        assert sigma_y.shape == sigma_z.shape == (3,)
        np.testing.assert_allclose(sigma_y, 0.22 * x ** 0.71)
        np.testing.assert_allclose(sigma_z, 0.20 * x ** 0.9)

    def test_sigma_grows_with_distance(self):
        sigma_y, sigma_z = get_sigma(np.array([10.0, 100.0, 1000.0]), 'C')
        assert np.all(np.diff(sigma_y) > 0)
        assert np.all(np.diff(sigma_z) > 0)

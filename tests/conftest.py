"""Shared fixtures for the co2sim test suite."""

import matplotlib
matplotlib.use('Agg')

import pytest

from co2sim.core.capture_model import Intervention
from co2sim.core.emission_model import EmissionSource


# ==================== FIXTURES ====================

@pytest.fixture
def unit_source():
    """Source emitting exactly 1 kg/s from a 20 m stack."""
    return EmissionSource(
        name='Unit Stack', x=100.0, y=100.0, emission_rate=3600.0,
        height=20.0, category='industry'
    )


@pytest.fixture
def sample_sources():
    return [
        EmissionSource(name='Factory A', x=100, y=200, emission_rate=1.5, height=40, category='industry'),
        EmissionSource(name='Power Plant', x=420, y=180, emission_rate=950.0, height=85, category='industry'),
        EmissionSource(name='Mall', x=600, y=640, emission_rate=45.2, height=25, category='commercial'),
        EmissionSource(name='Depot', x=340, y=900, emission_rate=130.0, height=0, category=''),
    ]


@pytest.fixture
def scrubber():
    """Industrial scrubber on the plume centreline, cell (row 25, col 4)."""
    return Intervention(type='industrial_scrubber', x=4 * 24 + 1, y=25 * 24 + 1, id=1)

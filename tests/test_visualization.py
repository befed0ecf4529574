"""Smoke tests for the dashboard figures."""

import matplotlib.pyplot as plt
import numpy as np
import plotly.graph_objects as go
from plotly.basedatatypes import BaseTraceType
import pytest

from co2sim.core.capture_model import Intervention
from co2sim.core.dispersion_model import generate_concentration_grid
from co2sim.visualization import (
    create_category_pie_chart,
    create_city_figure,
    create_heatmap_figure,
    create_summary_bar_chart,
    plot_concentration_grid,
)
from co2sim.visualization.city_3d import MIN_BUILDING_HEIGHT, _source_traces, building_height


@pytest.fixture
def grid(unit_source):
    return generate_concentration_grid([unit_source], 20, 24.0, 5.0, 'D')


class TestHeatmap:

    def test_plotly_heatmap(self, grid):
        fig = create_heatmap_figure(grid)
        (trace,) = fig.data
        assert isinstance(trace, go.Heatmap)
        assert np.asarray(trace.z).shape == (20, 20)
        assert trace.zmax == pytest.approx(grid.max())

    def test_all_zero_grid(self):
        fig = create_heatmap_figure(np.zeros((5, 5)))
        assert fig.data[0].zmax == 1.0

    def test_matplotlib_heatmap(self, grid):
        fig = plot_concentration_grid(grid, cell_size=24.0)
        try:
            assert fig.axes[0].get_xlabel() == 'Downwind (m)'
        finally:
            plt.close(fig)


class TestCityFigure:

    def test_one_building_per_source(self, sample_sources):
        interventions = [Intervention(type='afforestation', x=10.0, y=20.0, id=1)]
        fig = create_city_figure(sample_sources, interventions, rng=np.random.default_rng(0))
        meshes = [t for t in fig.data if isinstance(t, go.Mesh3d)]
        assert len(meshes) == len(sample_sources)
        assert any(t.name == 'Interventions' for t in fig.data)

    def test_source_traces_are_plotly_traces(self, sample_sources):
        traces = _source_traces(sample_sources, np.random.default_rng(0))
        assert traces
        assert all(isinstance(t, BaseTraceType) for t in traces)

    def test_empty_scene(self):
        fig = create_city_figure([], [])
        assert len(fig.data) == 1

    def test_building_height_range(self):
        assert building_height(0.0, 0.0, 10.0) == MIN_BUILDING_HEIGHT
        assert building_height(10.0, 0.0, 10.0) == pytest.approx(300.0)
        assert building_height(5.0, 5.0, 5.0) == MIN_BUILDING_HEIGHT


class TestAnalytics:

    def test_summary_bar_chart(self):
        fig = create_summary_bar_chart(total_emissions=1.0, total_capture=0.25)
        assert list(fig.data[0].y) == [3600.0, 900.0, 2700.0]

    def test_category_pie_chart(self, sample_sources):
        fig = create_category_pie_chart(sample_sources)
        assert list(fig.data[0].labels) == ['Industry', 'Commercial', 'Unknown']

"""
Visualization tools for the CO2 digital twin.

This package provides the heatmap, 3D city scene and analytics figures
built from scenario inputs and results.
"""

from .heatmap import create_heatmap_figure, plot_concentration_grid
from .city_3d import create_city_figure
from .analytics import create_summary_bar_chart, create_category_pie_chart

__all__ = [
    'create_heatmap_figure',
    'plot_concentration_grid',
    'create_city_figure',
    'create_summary_bar_chart',
    'create_category_pie_chart'
]

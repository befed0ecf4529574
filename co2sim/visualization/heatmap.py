"""
Concentration heatmap visualization.

This module renders a concentration grid as an interactive plotly heatmap
for the dashboard, or as a static matplotlib figure.
"""

from typing import Optional
import logging

import numpy as np
import matplotlib.pyplot as plt
import plotly.graph_objects as go
from matplotlib.colors import LinearSegmentedColormap, Normalize
from numpy.typing import NDArray

from ..utils.viz_utils import grid_value_range, heatmap_colorscale, hsl_to_rgb, legend_stops

logger = logging.getLogger(__name__)

HEATMAP_TITLE = 'CO₂ Concentration Heatmap (kg/m³)'

# Same blue -> red hue ramp as the plotly colorscale
CONCENTRATION_CMAP = LinearSegmentedColormap.from_list(
    'concentration',
    [hsl_to_rgb(hue, 100, 50) for hue in (240, 180, 120, 60, 0)]
)


def create_heatmap_figure(
    grid: NDArray[np.float64],
    cell_size: Optional[float] = None,
    title: str = HEATMAP_TITLE
) -> go.Figure:
    """Create a plotly heatmap of a concentration grid.

    Args:
        grid: Concentration grid in kg/m³, indexed [row][col]
        cell_size: If given, axes are in metres; otherwise in cell indices
        title: Figure title

    Returns:
        Plotly figure with one heatmap trace
    """
    grid = np.asarray(grid, dtype=np.float64)
    vmin, vmax = grid_value_range(grid)
    n_rows, n_cols = grid.shape if grid.ndim == 2 else (0, 0)

    scale = cell_size if cell_size else 1.0
    stops = legend_stops(vmin, vmax)

    fig = go.Figure(go.Heatmap(
        z=grid,
        x=np.arange(n_cols) * scale,
        y=np.arange(n_rows) * scale,
        zmin=vmin,
        zmax=vmax,
        colorscale=heatmap_colorscale(),
        opacity=0.7,
        hovertemplate='Value: %{z:.2e} kg/m³<extra></extra>',
        colorbar=dict(
            title='kg/m³',
            tickvals=[value for _, value in stops],
            ticktext=[f'{value:.1e} {label}'.strip() for label, value in stops]
        )
    ))

    axis_title = 'm' if cell_size else 'cell'
    fig.update_layout(
        title=title,
        title_x=0.5,
        xaxis_title=f'Downwind ({axis_title})',
        yaxis_title=f'Crosswind ({axis_title})',
        yaxis=dict(autorange='reversed', scaleanchor='x'),
        margin=dict(l=40, r=40, b=40, t=60)
    )
    return fig


def plot_concentration_grid(
    grid: NDArray[np.float64],
    cell_size: float = 1.0,
    ax: Optional[plt.Axes] = None,
    show: bool = False,
    title: Optional[str] = None,
    **plot_kwargs
) -> plt.Figure:
    """Plot a concentration grid with matplotlib.

    Args:
        grid: Concentration grid in kg/m³
        cell_size: Size of a cell in metres, used for the axes
        ax: Optional matplotlib Axes to plot on
        show: Whether to call plt.show()
        title: Plot title
        **plot_kwargs: Additional arguments passed to pcolormesh

    Returns:
        The matplotlib Figure containing the plot
    """
    grid = np.asarray(grid, dtype=np.float64)
    vmin, vmax = grid_value_range(grid)

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    n_rows, n_cols = grid.shape
    x = np.arange(n_cols + 1) * cell_size
    y = np.arange(n_rows + 1) * cell_size

    plot_kwargs.setdefault('cmap', CONCENTRATION_CMAP)
    plot_kwargs.setdefault('norm', Normalize(vmin=vmin, vmax=vmax))
    plot_kwargs.setdefault('alpha', 0.7)

    im = ax.pcolormesh(x, y, grid, shading='flat', **plot_kwargs)
    plt.colorbar(im, ax=ax, label='Concentration (kg/m³)')

    ax.set_aspect('equal')
    ax.invert_yaxis()
    ax.set_xlabel('Downwind (m)')
    ax.set_ylabel('Crosswind (m)')
    ax.set_title(title or HEATMAP_TITLE)

    if show:
        plt.show()

    return fig

"""
Visualization utilities for plotting and color management.
"""

from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Emission legend gradient, low -> high
EMISSION_LOW_COLOR = '#48bb78'
EMISSION_MID_COLOR = '#f6e05e'
EMISSION_HIGH_COLOR = '#f56565'


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[float, float, float]:
    """
    Convert HSL color to RGB.
    
    Args:
        h: Hue (0-360)
        s: Saturation (0-100)
        l: Lightness (0-100)
        
    Returns:
        Tuple of (r, g, b) values in range [0, 1]
    """
    h = (h % 360) / 360.0
    s = s / 100.0
    l = l / 100.0
    
    if s == 0:
        return (l, l, l)

    def hue_to_rgb(p, q, t):
        t = t % 1.0
        if t < 1/6:
            return p + (q - p) * 6 * t
        if t < 1/2:
            return q
        if t < 2/3:
            return p + (q - p) * (2/3 - t) * 6
        return p
    
    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    return (
        hue_to_rgb(p, q, h + 1/3),
        hue_to_rgb(p, q, h),
        hue_to_rgb(p, q, h - 1/3)
    )


def rgb_string(rgb: Tuple[float, float, float]) -> str:
    """Format an (r, g, b) tuple in [0, 1] as a plotly ``rgb(...)`` string."""
    return f'rgb({int(round(rgb[0]*255))}, {int(round(rgb[1]*255))}, {int(round(rgb[2]*255))})'


def grid_value_range(grid: Union[NDArray[np.float64], Sequence[Sequence[float]]]) -> Tuple[float, float]:
    """Return (min, max) of a concentration grid for color scaling.

    An empty grid gives (0, 0); a zero maximum is reported as 1 so the
    normalization never divides by zero for an all-zero grid.
    """
    values = np.asarray(grid, dtype=np.float64)
    if values.size == 0:
        return 0.0, 0.0
    vmin = float(np.nanmin(values))
    vmax = float(np.nanmax(values))
    return vmin, vmax or 1.0


def concentration_hue(value: float, vmin: float, vmax: float) -> float:
    """Map a concentration to a hue: 240 (blue) at vmin down to 0 (red) at vmax."""
    span = vmax - vmin
    normalized = (value - vmin) / span if span else 0.0
    normalized = min(max(normalized, 0.0), 1.0)
    return (1 - normalized) * 240


def heatmap_colorscale(n_stops: int = 5) -> List[List[Union[float, str]]]:
    """Plotly colorscale sampled evenly from concentration_hue."""
    stops = []
    for i in range(n_stops):
        position = i / (n_stops - 1)
        hue = concentration_hue(position, 0.0, 1.0)
        stops.append([position, rgb_string(hsl_to_rgb(hue, 100, 50))])
    return stops


def legend_stops(vmin: float, vmax: float) -> List[Tuple[str, float]]:
    """Labelled values for the heatmap legend (Min, Medium, Max and quartiles)."""
    span = vmax - vmin
    return [
        ('Min', vmin),
        ('', vmin + span * 0.25),
        ('Medium', vmin + span * 0.5),
        ('', vmin + span * 0.75),
        ('Max', vmax),
    ]


def _hex_to_rgb(color: str) -> Tuple[float, float, float]:
    color = color.lstrip('#')
    return tuple(int(color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def emission_color(rate: float, min_rate: float, max_rate: float) -> str:
    """Color for an emission rate on the green -> yellow -> red legend gradient."""
    span = max_rate - min_rate
    t = (rate - min_rate) / span if span else 0.5
    t = min(max(t, 0.0), 1.0)

    if t < 0.5:
        start, end, local_t = EMISSION_LOW_COLOR, EMISSION_MID_COLOR, t * 2
    else:
        start, end, local_t = EMISSION_MID_COLOR, EMISSION_HIGH_COLOR, (t - 0.5) * 2

    start_rgb, end_rgb = _hex_to_rgb(start), _hex_to_rgb(end)
    rgb = tuple(a + (b - a) * local_t for a, b in zip(start_rgb, end_rgb))
    return rgb_string(rgb)

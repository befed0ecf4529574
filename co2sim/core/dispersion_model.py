"""
Gaussian plume model for CO2 dispersion over the city grid.

This module computes a ground-level concentration field from a set of point
emission sources using the Gaussian plume equation with power-law
dispersion coefficients (see stability.py).

The plume frame is the grid itself: downwind distance is measured from the
grid's left edge (column index) and crosswind offset from the grid's middle
row, for every source alike. Source positions do not shift the plume origin.
"""

from typing import Iterable, Optional, Union
import logging
import math

import numpy as np
from numpy.typing import NDArray

from .emission_model import EmissionSource, SECONDS_PER_HOUR
from .stability import get_sigma, resolve_stability_class

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_WIND_SPEED",
    "DEFAULT_STACK_HEIGHT",
    "ground_level_concentration",
    "generate_concentration_grid"
]

MIN_WIND_SPEED = 0.1  # m/s, substituted for a calm (zero) wind
DEFAULT_STACK_HEIGHT = 20.0  # m


def ground_level_concentration(
    q: float,
    wind_speed: float,
    sigma_y: Union[float, NDArray[np.float64]],
    sigma_z: Union[float, NDArray[np.float64]],
    y: Union[float, NDArray[np.float64]],
    h: float
) -> Union[float, NDArray[np.float64]]:
    """Evaluate the Gaussian plume equation at ground level (z = 0).

    Args:
        q: Emission rate in kg/s
        wind_speed: Wind speed in m/s
        sigma_y: Cross-wind dispersion coefficient (m), must be > 0
        sigma_z: Vertical dispersion coefficient (m), must be > 0
        y: Cross-wind offset from the plume centreline (m)
        h: Stack height (m)

    Returns:
        Concentration in kg/m³
    """
    term1 = q / (np.pi * wind_speed * sigma_y * sigma_z)
    term2 = np.exp(-0.5 * (y / sigma_y) ** 2)
    term3 = np.exp(-0.5 * (h / sigma_z) ** 2)
    return term1 * term2 * term3


def generate_concentration_grid(
    sources: Optional[Iterable[EmissionSource]],
    grid_size: int,
    cell_size: float,
    wind_speed: float,
    stability_class: str
) -> NDArray[np.float64]:
    """Generate a 2D grid of ground-level CO2 concentrations.

    Row i is the cross-wind index and column j the downwind index. A cell's
    downwind distance is ``j * cell_size`` and its cross-wind offset is
    ``(i - grid_size / 2) * cell_size``. Contributions of all sources are
    summed per cell.

    Args:
        sources: Emission sources (may be empty)
        grid_size: Dimension of the square grid (e.g. 50 for 50x50)
        cell_size: Real-world size of each grid cell in metres
        wind_speed: Wind speed in m/s; exactly 0 is replaced by 0.1
        stability_class: Pasquill stability class (A-F); unknown -> D

    Returns:
        Array of shape (grid_size, grid_size) with concentrations in kg/m³
    """
    grid_size = max(int(grid_size), 0)
    grid = np.zeros((grid_size, grid_size), dtype=np.float64)

    if wind_speed == 0:
        logger.debug(f"Zero wind speed replaced by {MIN_WIND_SPEED} m/s")
        wind_speed = MIN_WIND_SPEED
    elif wind_speed < 0:
        logger.warning(f"Negative wind speed {wind_speed} m/s")
    stability_class = resolve_stability_class(stability_class)

    sources = [] if sources is None else list(sources)
    if not sources or grid_size == 0:
        return grid

    x = np.arange(grid_size) * cell_size  # downwind distance per column
    y = (np.arange(grid_size) - grid_size / 2) * cell_size  # crosswind per row

    # Upwind columns contribute nothing; so does x == 0, where both sigmas vanish
    downwind = x > 0
    if not np.any(downwind):
        return grid

    sigma_y, sigma_z = get_sigma(x[downwind], stability_class)

    for source in sources:
        q = source.emission_rate / SECONDS_PER_HOUR
        h = source.height
        if not h or math.isnan(h):
            h = DEFAULT_STACK_HEIGHT

        concentration = ground_level_concentration(
            q=q,
            wind_speed=wind_speed,
            sigma_y=sigma_y[np.newaxis, :],
            sigma_z=sigma_z[np.newaxis, :],
            y=y[:, np.newaxis],
            h=h
        )
        grid[:, downwind] += concentration

    return grid

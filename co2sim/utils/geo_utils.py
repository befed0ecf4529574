"""
Coordinate helpers for placing geographic data on the grid-local plane.
"""

from typing import Tuple

import numpy as np

EARTH_RADIUS = 6371e3  # m


def lat_lon_to_meters(lat: float, lon: float, center_lat: float) -> Tuple[float, float]:
    """Convert latitude/longitude to x/y metres (equirectangular projection).

    This is a flat-earth approximation and is not accurate for large areas.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        center_lat: Latitude of the map centre in degrees

    Returns:
        Tuple of (x, y) in metres
    """
    x = EARTH_RADIUS * np.radians(lon) * np.cos(np.radians(center_lat))
    y = EARTH_RADIUS * np.radians(lat)
    return x, y

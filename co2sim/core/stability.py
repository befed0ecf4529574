"""
Atmospheric stability classes for the Gaussian plume model.

This module holds the Pasquill stability parameter table and the power-law
dispersion coefficients derived from it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple, Union
import logging

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_STABILITY_CLASS",
    "STABILITY_CLASSES",
    "STABILITY_LABELS",
    "StabilityParams",
    "resolve_stability_class",
    "get_stability_params",
    "get_sigma"
]

DEFAULT_STABILITY_CLASS = "D"

# Power-law coefficients (urban), one row per class: ay, by, az, bz
_POWER_LAW_VALUES_TABLE = np.array([
    [0.32, 0.71, 0.24, 0.9],
    [0.22, 0.71, 0.20, 0.9],
    [0.16, 0.71, 0.14, 0.9],
    [0.11, 0.71, 0.08, 0.9],
    [0.08, 0.71, 0.06, 0.9],
    [0.06, 0.71, 0.04, 0.9],
])


@dataclass(frozen=True)
class StabilityParams:
    """Power-law parameters for one stability class.

    sigma_y = ay * x ** by (cross-wind), sigma_z = az * x ** bz (vertical).
    """
    ay: float
    by: float
    az: float
    bz: float


STABILITY_CLASSES: Mapping[str, StabilityParams] = MappingProxyType({
    cls: StabilityParams(*(float(v) for v in params))
    for cls, params in zip(
        ["A", "B", "C", "D", "E", "F"],
        _POWER_LAW_VALUES_TABLE
    )
})

STABILITY_LABELS: Mapping[str, str] = MappingProxyType({
    "A": "Very Unstable",
    "B": "Unstable",
    "C": "Slightly Unstable",
    "D": "Neutral",
    "E": "Slightly Stable",
    "F": "Stable",
})


def resolve_stability_class(stability_class) -> str:
    """Return a known class key, falling back to neutral (D) for anything else."""
    if isinstance(stability_class, str) and stability_class in STABILITY_CLASSES:
        return stability_class
    logger.warning(
        f"Unknown stability class {stability_class!r}, "
        f"using {DEFAULT_STABILITY_CLASS}"
    )
    return DEFAULT_STABILITY_CLASS


def get_stability_params(stability_class) -> StabilityParams:
    return STABILITY_CLASSES[resolve_stability_class(stability_class)]


def get_sigma(
    x: Union[float, NDArray[np.float64]],
    stability_class: str
) -> Tuple[Union[float, NDArray[np.float64]], Union[float, NDArray[np.float64]]]:
    """Calculate the dispersion coefficients at a downwind distance.

    Args:
        x: Downwind distance in metres (scalar or array). Precondition: x >= 0.
            At x = 0 both coefficients are 0.
        stability_class: Pasquill stability class (A-F). Unknown classes
            fall back to D.

    Returns:
        Tuple of (sigma_y, sigma_z) in metres
    """
    params = get_stability_params(stability_class)
    sigma_y = params.ay * x ** params.by
    sigma_z = params.az * x ** params.bz
    return sigma_y, sigma_z

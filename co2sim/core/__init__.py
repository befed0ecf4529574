"""
Core models for CO2 emission, dispersion and capture.

Active Modules:
- stability: Pasquill stability classes and dispersion coefficients
- dispersion_model: Ground-level concentration grid (Gaussian plume)
- emission_model: Emission sources and aggregate emission rates
- capture_model: Capture technologies and captured CO2
"""

from .stability import STABILITY_CLASSES, StabilityParams, get_sigma
from .dispersion_model import generate_concentration_grid
from .emission_model import EmissionSource, calculate_total_emissions
from .capture_model import (
    TECHNOLOGIES, Intervention, TechnologySpec, calculate_total_capture
)

__all__ = [
    "STABILITY_CLASSES",
    "StabilityParams",
    "get_sigma",
    "generate_concentration_grid",
    "EmissionSource",
    "calculate_total_emissions",
    "TECHNOLOGIES",
    "Intervention",
    "TechnologySpec",
    "calculate_total_capture"
]

"""
CO2 Digital Twin

Simulated CO2 emissions, Gaussian plume dispersion and capture interventions
over a city grid.
"""

__version__ = "0.1.0"

# Import core functionality
from .core.stability import *
from .core.dispersion_model import *
from .core.emission_model import *
from .core.capture_model import *

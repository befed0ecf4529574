"""
Scenario parameters and recomputation.

A scenario holds the emission sources, the placed interventions and the
weather settings. Every change produces a fresh full recomputation of the
concentration grid, the emission total and the captured CO2; nothing is
cached between runs.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
import logging

import numpy as np
from numpy.typing import NDArray

from ..core.capture_model import (
    TECHNOLOGIES, Intervention, calculate_capture_by_intervention, capture_cost_per_hour
)
from ..core.dispersion_model import generate_concentration_grid
from ..core.emission_model import EmissionSource, SECONDS_PER_HOUR, calculate_total_emissions

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 50
DEFAULT_CELL_SIZE = 24.0  # m
INITIAL_WIND_SPEED = 5.0  # m/s
INITIAL_STABILITY_CLASS = "C"
INTERVENTION_EXTENT = 300.0  # m, placement range for randomly placed interventions


@dataclass
class ScenarioParameters:
    """Container for all scenario inputs."""

    sources: List[EmissionSource] = field(default_factory=list)
    interventions: List[Intervention] = field(default_factory=list)

    # Weather
    wind_speed: float = INITIAL_WIND_SPEED
    stability_class: str = INITIAL_STABILITY_CLASS  # A-F

    # Grid
    grid_size: int = DEFAULT_GRID_SIZE
    cell_size: float = DEFAULT_CELL_SIZE

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a JSON-serialisable dictionary."""
        return {
            'sources': [source.to_dict() for source in self.sources],
            'interventions': [intervention.to_dict() for intervention in self.interventions],
            'wind_speed': self.wind_speed,
            'stability_class': self.stability_class,
            'grid_size': self.grid_size,
            'cell_size': self.cell_size
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScenarioParameters':
        """Create ScenarioParameters from a dictionary, ignoring unknown keys."""
        params = cls()
        params.sources = [EmissionSource.from_record(s) for s in data.get('sources') or []]
        params.interventions = [Intervention.from_dict(i) for i in data.get('interventions') or []]
        params.wind_speed = float(data.get('wind_speed', INITIAL_WIND_SPEED))
        params.stability_class = data.get('stability_class', INITIAL_STABILITY_CLASS)
        params.grid_size = int(data.get('grid_size', DEFAULT_GRID_SIZE))
        params.cell_size = float(data.get('cell_size', DEFAULT_CELL_SIZE))
        return params


@dataclass
class ScenarioResult:
    """Outputs of one scenario run. Rates are in kg/s unless suffixed."""
    grid: NDArray[np.float64]
    total_emissions: float
    capture_by_intervention: List[float]
    total_capture: float

    @property
    def net_emissions(self) -> float:
        return self.total_emissions - self.total_capture

    @property
    def total_emissions_kg_h(self) -> float:
        return self.total_emissions * SECONDS_PER_HOUR

    @property
    def total_capture_kg_h(self) -> float:
        return self.total_capture * SECONDS_PER_HOUR

    @property
    def net_emissions_kg_h(self) -> float:
        return self.net_emissions * SECONDS_PER_HOUR


def run_scenario(params: ScenarioParameters) -> ScenarioResult:
    """Recompute the concentration grid, emissions and capture for a scenario.

    Args:
        params: Scenario inputs

    Returns:
        ScenarioResult with the concentration grid and aggregate rates
    """
    grid = generate_concentration_grid(
        params.sources,
        params.grid_size,
        params.cell_size,
        params.wind_speed,
        params.stability_class
    )
    total_emissions = calculate_total_emissions(params.sources)
    capture = calculate_capture_by_intervention(params.interventions, grid, params.cell_size)

    return ScenarioResult(
        grid=grid,
        total_emissions=total_emissions,
        capture_by_intervention=capture,
        total_capture=sum(capture, 0.0)
    )


def add_intervention(
    params: ScenarioParameters,
    type: str,
    x: float,
    y: float,
    id: Optional[int] = None
) -> ScenarioParameters:
    """Return new parameters with an intervention appended.

    The existing intervention list is left untouched.
    """
    if type not in TECHNOLOGIES:
        logger.warning(f"Adding intervention of unknown type {type!r}")
    intervention = Intervention(type=type, x=x, y=y) if id is None else Intervention(type=type, x=x, y=y, id=id)
    return replace(params, interventions=[*params.interventions, intervention])


def make_random_intervention(
    type: str,
    extent: float = INTERVENTION_EXTENT,
    rng: Optional[np.random.Generator] = None
) -> Intervention:
    """Create an intervention at a uniformly random position in [0, extent)²."""
    if rng is None:
        rng = np.random.default_rng()
    x, y = rng.uniform(0.0, extent, size=2)
    return Intervention(type=type, x=float(x), y=float(y))


def intervention_costs_per_hour(
    interventions: List[Intervention],
    capture_by_intervention: List[float]
) -> List[float]:
    """Hourly operating cost of each intervention for its captured CO2."""
    return [
        capture_cost_per_hour(intervention, captured)
        for intervention, captured in zip(interventions, capture_by_intervention)
    ]

"""
CO2 capture technologies and the capture model.

Captured mass is approximated from the concentration in the grid cell an
intervention sits in, over a volume of one cell footprint times a fixed
mixing height, scaled by the technology's efficiency.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
import itertools
import logging
import math

import numpy as np
from numpy.typing import NDArray

from .emission_model import SECONDS_PER_HOUR

logger = logging.getLogger(__name__)

__all__ = [
    "MIXING_HEIGHT",
    "TECHNOLOGIES",
    "TechnologySpec",
    "Intervention",
    "capture_for_intervention",
    "calculate_capture_by_intervention",
    "calculate_total_capture",
    "capture_cost_per_hour"
]

MIXING_HEIGHT = 10.0  # m, assumed vertical extent of the captured volume
KG_PER_TONNE = 1000.0

_intervention_ids = itertools.count(1)


@dataclass(frozen=True)
class TechnologySpec:
    """Static description of a capture technology.

    Attributes:
        name: Display name
        efficiency: Fraction of local CO2 captured, in [0, 1]
        cost_per_ton: Cost in $ per tonne of CO2 captured
        radius: Effective radius in metres (display only)
    """
    name: str
    efficiency: float
    cost_per_ton: float
    radius: float


TECHNOLOGIES: Mapping[str, TechnologySpec] = MappingProxyType({
    'direct_air_capture': TechnologySpec(
        name='Direct Air Capture (DAC)',
        efficiency=0.85,
        cost_per_ton=600.0,
        radius=50.0,
    ),
    'afforestation': TechnologySpec(
        name='Afforestation Zone',
        efficiency=0.10,
        cost_per_ton=50.0,
        radius=200.0,
    ),
    'industrial_scrubber': TechnologySpec(
        name='Industrial Scrubber',
        efficiency=0.95,
        cost_per_ton=100.0,
        radius=20.0,
    ),
})


@dataclass(frozen=True)
class Intervention:
    """A capture technology placed at a grid-local position (metres)."""
    type: str
    x: float
    y: float
    id: int = field(default_factory=lambda: next(_intervention_ids))

    @property
    def technology(self) -> Optional[TechnologySpec]:
        return TECHNOLOGIES.get(self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'type': self.type, 'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Intervention':
        kwargs = {'type': data['type'], 'x': float(data['x']), 'y': float(data['y'])}
        if data.get('id') is not None:
            kwargs['id'] = data['id']
        return cls(**kwargs)


Grid = Union[NDArray[np.float64], Sequence[Sequence[float]]]


def _cell_value(grid: Grid, row: int, col: int) -> Optional[float]:
    """Return grid[row][col], or None when the index lies outside the grid."""
    if not 0 <= row < len(grid):
        return None
    cells = grid[row]
    if not 0 <= col < len(cells):
        return None
    return cells[col]


def capture_for_intervention(
    intervention: Intervention,
    concentration_grid: Grid,
    cell_size: float
) -> float:
    """Calculate the CO2 captured by a single intervention.

    Args:
        intervention: The placed intervention
        concentration_grid: Concentration grid in kg/m³, indexed [row][col]
        cell_size: Size of a grid cell in metres

    Returns:
        Captured CO2 in kg/s. 0 for unknown technologies, positions outside
        the grid and cells without concentration (zero or missing).
    """
    tech = TECHNOLOGIES.get(intervention.type)
    if tech is None:
        logger.warning(f"Unknown intervention type {intervention.type!r}, skipped")
        return 0.0
    if not cell_size:
        return 0.0

    col = intervention.x / cell_size
    row = intervention.y / cell_size
    if not (math.isfinite(col) and math.isfinite(row)):
        return 0.0

    local_concentration = _cell_value(concentration_grid, math.floor(row), math.floor(col))
    if not local_concentration or local_concentration != local_concentration:
        logger.debug(
            f"No concentration at intervention {intervention.id} "
            f"({intervention.x}, {intervention.y})"
        )
        return 0.0

    affected_volume = cell_size * cell_size * MIXING_HEIGHT  # m³
    available_co2 = float(local_concentration) * affected_volume  # kg
    return available_co2 * tech.efficiency


def calculate_capture_by_intervention(
    interventions: Optional[Iterable[Intervention]],
    concentration_grid: Grid,
    cell_size: float
) -> List[float]:
    """Captured CO2 (kg/s) for each intervention, in input order."""
    if interventions is None:
        return []
    return [
        capture_for_intervention(intervention, concentration_grid, cell_size)
        for intervention in interventions
    ]


def calculate_total_capture(
    interventions: Optional[Iterable[Intervention]],
    concentration_grid: Grid,
    cell_size: float
) -> float:
    """Calculate the total CO2 captured by a set of interventions.

    Args:
        interventions: Placed interventions (may be empty)
        concentration_grid: Concentration grid in kg/m³
        cell_size: Size of a grid cell in metres

    Returns:
        Total CO2 captured in kg/s
    """
    return sum(
        calculate_capture_by_intervention(interventions, concentration_grid, cell_size),
        0.0
    )


def capture_cost_per_hour(intervention: Intervention, captured_kg_s: float) -> float:
    """Operating cost ($/hour) of capturing ``captured_kg_s`` with an intervention."""
    tech = TECHNOLOGIES.get(intervention.type)
    if tech is None:
        return 0.0
    tonnes_per_hour = captured_kg_s * SECONDS_PER_HOUR / KG_PER_TONNE
    return tonnes_per_hour * tech.cost_per_ton

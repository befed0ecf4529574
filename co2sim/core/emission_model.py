"""
Emission sources and aggregate emission calculations.

Emission rates are carried in kg/hour on each source; aggregate rates are
returned in kg/s to match the dispersion and capture models.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "SECONDS_PER_HOUR",
    "EmissionSource",
    "calculate_total_emissions",
    "emissions_by_category",
    "emission_rate_range"
]

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class EmissionSource:
    """A point emission source on the city grid.

    Attributes:
        name: Display name of the source
        x: Grid-local x position in metres
        y: Grid-local y position in metres
        emission_rate: Emission rate in kg/hour
        height: Stack height in metres (0 means "not given")
        category: Source category, e.g. "industry" or "commercial"
    """
    name: str
    x: float = 0.0
    y: float = 0.0
    emission_rate: float = 0.0
    height: float = 0.0
    category: str = ""

    def __post_init__(self):
        if self.emission_rate < 0:
            logger.warning(
                f"Source {self.name!r} has a negative emission rate "
                f"({self.emission_rate} kg/h)"
            )

    @property
    def emission_rate_kg_s(self) -> float:
        return self.emission_rate / SECONDS_PER_HOUR

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'EmissionSource':
        """Create a source from a loader row; missing numbers become 0."""
        def number(key: str) -> float:
            value = record.get(key)
            try:
                value = float(value)
            except (TypeError, ValueError):
                return 0.0
            return value if value == value else 0.0

        return cls(
            name=str(record.get('name') or ''),
            x=number('x'),
            y=number('y'),
            emission_rate=number('emission_rate'),
            height=number('height'),
            category=str(record.get('category') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'x': self.x,
            'y': self.y,
            'emission_rate': self.emission_rate,
            'height': self.height,
            'category': self.category,
        }


def calculate_total_emissions(sources: Optional[Iterable[EmissionSource]]) -> float:
    """Calculate the total emission rate of a set of sources.

    Args:
        sources: Emission sources (may be empty or None)

    Returns:
        Total emission rate in kg/s
    """
    if sources is None:
        return 0.0
    return sum((source.emission_rate / SECONDS_PER_HOUR for source in sources), 0.0)


def emissions_by_category(sources: Optional[Iterable[EmissionSource]]) -> Dict[str, float]:
    """Sum emission rates (kg/hour) per source category.

    Sources without a category are grouped under "unknown".
    """
    totals: Dict[str, float] = {}
    if sources is None:
        return totals
    for source in sources:
        category = source.category or 'unknown'
        totals[category] = totals.get(category, 0.0) + source.emission_rate
    return totals


def emission_rate_range(sources: Optional[Iterable[EmissionSource]]) -> Tuple[float, float]:
    """Return (min, max) emission rate in kg/hour, or (0, 0) with no sources."""
    rates = [] if sources is None else [source.emission_rate for source in sources]
    if not rates:
        return 0.0, 0.0
    return min(rates), max(rates)

"""Data loading utilities for the CO2 Digital Twin Dashboard."""

import logging
from pathlib import Path
from typing import List, Union

from co2sim.core.emission_model import EmissionSource
from co2sim.scene.source_loader import load_sources_from_csv, load_sources_from_json

logger = logging.getLogger(__name__)


def load_emission_sources(file_path: Union[str, Path]) -> List[EmissionSource]:
    """Load emission sources from a CSV or JSON file, chosen by file suffix."""
    if not Path(file_path).exists():
        logger.warning(f"Emission source file not found: {file_path}")
        return []

    suffix = Path(file_path).suffix.lower()
    if suffix == '.json':
        return load_sources_from_json(file_path)
    if suffix != '.csv':
        logger.warning(f"Unknown source file type {suffix!r}, reading {file_path} as CSV")
    return load_sources_from_csv(file_path)

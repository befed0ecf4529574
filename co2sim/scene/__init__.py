"""
Scenario inputs and orchestration for the CO2 digital twin.

This module provides loading of emission sources from tabular files and
the scenario state that drives recomputation of the dispersion and
capture models.
"""

from .source_loader import load_sources_from_csv, load_sources_from_json, sources_from_dataframe
from .scenario import ScenarioParameters, ScenarioResult, run_scenario, add_intervention

__all__ = [
    'load_sources_from_csv',
    'load_sources_from_json',
    'sources_from_dataframe',
    'ScenarioParameters',
    'ScenarioResult',
    'run_scenario',
    'add_intervention'
]

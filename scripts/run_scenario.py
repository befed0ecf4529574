"""
Run a CO2 dispersion and capture scenario from the command line.

Loads emission sources, places a few capture interventions, recomputes the
concentration grid and writes a static heatmap next to the summary.

Usage:
    python scripts/run_scenario.py [sources.csv] [output.png]
"""

from pathlib import Path
import logging
import sys

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from co2sim.core.capture_model import TECHNOLOGIES
from co2sim.core.emission_model import SECONDS_PER_HOUR
from co2sim.scene.scenario import ScenarioParameters, add_intervention, run_scenario
from co2sim.scene.source_loader import load_sources_from_csv
from co2sim.visualization.heatmap import plot_concentration_grid

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = project_root / "data" / "emission_sources_data.csv"
DEFAULT_OUTPUT = "concentration_heatmap.png"

WIND_SPEED = 5.0  # m/s
STABILITY_CLASS = "C"

# (technology, x, y) placed for the example run
EXAMPLE_INTERVENTIONS = [
    ("industrial_scrubber", 100.0, 600.0),
    ("direct_air_capture", 200.0, 620.0),
    ("afforestation", 480.0, 560.0),
]


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    sources_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SOURCES
    output_path = Path(sys.argv[2]) if len(sys.argv) > 2 else Path(DEFAULT_OUTPUT)

    params = ScenarioParameters(
        sources=load_sources_from_csv(sources_path),
        wind_speed=WIND_SPEED,
        stability_class=STABILITY_CLASS
    )
    for tech, x, y in EXAMPLE_INTERVENTIONS:
        params = add_intervention(params, tech, x, y)

    result = run_scenario(params)

    logger.info(f"Sources: {len(params.sources)}, interventions: {len(params.interventions)}")
    for intervention, captured in zip(params.interventions, result.capture_by_intervention):
        logger.info(
            f"  {TECHNOLOGIES[intervention.type].name} at ({intervention.x:.0f}, {intervention.y:.0f}): "
            f"{captured * SECONDS_PER_HOUR:.4f} kg/hr"
        )
    logger.info(f"Total emission: {result.total_emissions_kg_h:.2f} kg/hr")
    logger.info(f"Total capture:  {result.total_capture_kg_h:.4f} kg/hr")
    logger.info(f"Net emission:   {result.net_emissions_kg_h:.2f} kg/hr")

    fig = plot_concentration_grid(result.grid, cell_size=params.cell_size)
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Heatmap written to {output_path}")


if __name__ == '__main__':
    main()

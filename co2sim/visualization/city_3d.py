"""
3D city scene of emission sources and capture interventions.

Sources are drawn as buildings whose height and colour scale with emission
rate; interventions are drawn as markers on the ground plane.
"""

from typing import List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.basedatatypes import BaseTraceType

from ..core.capture_model import Intervention
from ..core.emission_model import EmissionSource, emission_rate_range
from ..utils.viz_utils import emission_color

CITY_SIZE = 1200.0  # m, side of the ground plane; positions are centred on it
MIN_BUILDING_HEIGHT = 20.0
BUILDING_HEIGHT_RANGE = 280.0
BUILDING_WIDTH = 35.0
SMOKE_THRESHOLD = 0.6  # normalized emission above which a building smokes
SMOKE_PARTICLES = 30
INTERVENTION_COLOR = '#00d1b2'
GROUND_COLOR = '#34495e'


def normalized_emission(rate: float, min_rate: float, max_rate: float) -> float:
    return (rate - min_rate) / ((max_rate - min_rate) or 1.0)


def building_height(rate: float, min_rate: float, max_rate: float) -> float:
    """Display height of a source building in metres."""
    return MIN_BUILDING_HEIGHT + normalized_emission(rate, min_rate, max_rate) * BUILDING_HEIGHT_RANGE


def _box_mesh(x: float, y: float, height: float, color: str, name: str, hover: str) -> go.Mesh3d:
    """Axis-aligned box centred on (x, y) standing on the ground."""
    half = BUILDING_WIDTH / 2
    xs = [x - half, x - half, x + half, x + half] * 2
    ys = [y - half, y + half, y + half, y - half] * 2
    zs = [0.0] * 4 + [height] * 4
    return go.Mesh3d(
        x=xs, y=ys, z=zs,
        i=[7, 0, 0, 0, 4, 4, 6, 6, 4, 0, 3, 2],
        j=[3, 4, 1, 2, 5, 6, 5, 2, 0, 1, 6, 3],
        k=[0, 7, 2, 3, 6, 7, 1, 1, 5, 5, 7, 6],
        color=color,
        flatshading=True,
        name=name,
        hovertext=hover,
        hoverinfo='text',
        showlegend=False
    )


def _source_traces(
    sources: Sequence[EmissionSource],
    rng: np.random.Generator
) -> List[BaseTraceType]:
    min_rate, max_rate = emission_rate_range(sources)
    offset = CITY_SIZE / 2
    traces = []

    label_x, label_y, label_z, labels = [], [], [], []
    smoke_x, smoke_y, smoke_z = [], [], []

    for source in sources:
        height = building_height(source.emission_rate, min_rate, max_rate)
        x, y = source.x - offset, source.y - offset
        hover = f'{source.name}<br>Emission: {source.emission_rate:.2f} kg/hr'

        traces.append(_box_mesh(
            x, y, height,
            emission_color(source.emission_rate, min_rate, max_rate),
            source.name, hover
        ))

        label_x.append(x)
        label_y.append(y)
        label_z.append(height + 20)
        labels.append(f'<b>{source.name}</b><br>{source.emission_rate:.2f} kg/hr')

        if normalized_emission(source.emission_rate, min_rate, max_rate) > SMOKE_THRESHOLD:
            smoke_x.extend(x + (rng.random(SMOKE_PARTICLES) - 0.5) * 30)
            smoke_y.extend(y + (rng.random(SMOKE_PARTICLES) - 0.5) * 30)
            smoke_z.extend(height - 10 + rng.random(SMOKE_PARTICLES) * 120)

    if labels:
        traces.append(go.Scatter3d(
            x=label_x, y=label_y, z=label_z,
            mode='text',
            text=labels,
            textfont=dict(color='white', size=10),
            hoverinfo='skip',
            name='Sources',
            showlegend=False
        ))

    if smoke_x:
        traces.append(go.Scatter3d(
            x=smoke_x, y=smoke_y, z=smoke_z,
            mode='markers',
            marker=dict(size=6, color='#d0d0d0', opacity=0.25),
            hoverinfo='skip',
            name='Smoke',
            showlegend=False
        ))

    return traces


def _intervention_trace(interventions: Sequence[Intervention]) -> Optional[go.Scatter3d]:
    if not interventions:
        return None

    offset = CITY_SIZE / 2
    names = [
        inter.technology.name if inter.technology else 'Unknown'
        for inter in interventions
    ]
    return go.Scatter3d(
        x=[inter.x - offset for inter in interventions],
        y=[inter.y - offset for inter in interventions],
        z=[0.0] * len(interventions),
        mode='markers+text',
        marker=dict(size=10, color=INTERVENTION_COLOR, opacity=0.5, symbol='circle'),
        text=names,
        textposition='top center',
        textfont=dict(color=INTERVENTION_COLOR),
        hovertemplate='%{text}<extra></extra>',
        name='Interventions'
    )


def create_city_figure(
    sources: Sequence[EmissionSource],
    interventions: Sequence[Intervention] = (),
    rng: Optional[np.random.Generator] = None
) -> go.Figure:
    """Create the 3D city scene.

    Args:
        sources: Emission sources to draw as buildings
        interventions: Placed capture interventions
        rng: Random generator for smoke particle placement

    Returns:
        Plotly figure with the 3D scene
    """
    if rng is None:
        rng = np.random.default_rng()

    half = CITY_SIZE / 2
    ground = go.Surface(
        x=[-half, half],
        y=[-half, half],
        z=[[0.0, 0.0], [0.0, 0.0]],
        colorscale=[[0, GROUND_COLOR], [1, GROUND_COLOR]],
        showscale=False,
        hoverinfo='skip',
        opacity=0.9,
        name='Ground'
    )

    traces = [ground] + _source_traces(list(sources), rng)
    intervention_trace = _intervention_trace(list(interventions))
    if intervention_trace is not None:
        traces.append(intervention_trace)

    fig = go.Figure(data=traces)
    fig.update_layout(
        scene=dict(
            xaxis_title='X (m)',
            yaxis_title='Y (m)',
            zaxis_title='Height (m)',
            xaxis=dict(range=[-half, half]),
            yaxis=dict(range=[-half, half]),
            aspectmode='manual',
            aspectratio=dict(x=1, y=1, z=0.4),
            bgcolor=GROUND_COLOR,
            camera=dict(eye=dict(x=0, y=-1.25, z=1.0))
        ),
        paper_bgcolor=GROUND_COLOR,
        font=dict(color='white'),
        margin=dict(l=0, r=0, b=0, t=30)
    )
    return fig

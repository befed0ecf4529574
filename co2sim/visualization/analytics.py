"""
Summary analytics charts: emission balance and emissions by category.
"""

from typing import Sequence

import plotly.graph_objects as go

from ..core.emission_model import SECONDS_PER_HOUR, EmissionSource, emissions_by_category

CATEGORY_COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042']
BAR_COLOR = '#8884d8'


def create_summary_bar_chart(total_emissions: float, total_capture: float) -> go.Figure:
    """Bar chart of total, captured and net emission.

    Args:
        total_emissions: Total emission rate in kg/s
        total_capture: Total captured CO2 in kg/s

    Returns:
        Plotly bar chart with values in kg/hr
    """
    names = ['Total Emission (kg/hr)', 'Total Capture (kg/hr)', 'Net Emission (kg/hr)']
    values = [
        round(total_emissions * SECONDS_PER_HOUR, 2),
        round(total_capture * SECONDS_PER_HOUR, 2),
        round((total_emissions - total_capture) * SECONDS_PER_HOUR, 2)
    ]

    fig = go.Figure(go.Bar(x=names, y=values, marker_color=BAR_COLOR, name='value'))
    fig.update_layout(
        yaxis_title='kg/hr',
        margin=dict(l=20, r=30, b=5, t=20),
        height=300
    )
    return fig


def create_category_pie_chart(sources: Sequence[EmissionSource]) -> go.Figure:
    """Pie chart of emission rate (kg/hr) per source category."""
    totals = emissions_by_category(sources)
    labels = [category[:1].upper() + category[1:] for category in totals]

    fig = go.Figure(go.Pie(
        labels=labels,
        values=list(totals.values()),
        marker=dict(colors=[
            CATEGORY_COLORS[i % len(CATEGORY_COLORS)] for i in range(len(labels))
        ]),
        textinfo='label+value'
    ))
    fig.update_layout(height=300, margin=dict(l=20, r=20, b=20, t=20))
    return fig

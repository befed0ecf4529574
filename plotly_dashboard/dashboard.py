# Standard library
from pathlib import Path
import logging
import sys

# Third-party
import dash
from dash import dcc, html, ALL, ctx
from dash.dependencies import Input, Output, State
import numpy as np

# Add the project root and this directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.append(str(Path(__file__).parent))

from co2sim.core.capture_model import TECHNOLOGIES, Intervention
from co2sim.core.emission_model import SECONDS_PER_HOUR, emission_rate_range
from co2sim.core.stability import STABILITY_CLASSES, STABILITY_LABELS
from co2sim.scene.scenario import (
    ScenarioParameters, ScenarioResult, run_scenario, add_intervention,
    make_random_intervention, intervention_costs_per_hour,
    INITIAL_WIND_SPEED, INITIAL_STABILITY_CLASS
)
from co2sim.utils.viz_utils import EMISSION_LOW_COLOR, EMISSION_MID_COLOR, EMISSION_HIGH_COLOR
from co2sim.visualization import (
    create_heatmap_figure, create_city_figure,
    create_summary_bar_chart, create_category_pie_chart
)

from data_loader import load_emission_sources

logger = logging.getLogger(__name__)

# ==============================================
# USER CONFIGURATION
# ==============================================

# Data source configuration
DATA_DIR = project_root / "data"
SOURCES_FILE = "emission_sources_data.csv"

# Simulation grid
GRID_SIZE = 50
CELL_SIZE = 24.0  # m

# Wind slider
WIND_MIN = 0.1
WIND_MAX = 20.0
WIND_STEP = 0.1

# Color scheme
ACCENT_BLUE = '#007bff'
PANEL_DARK = 'rgba(40, 40, 40, 0.85)'
BORDER_GREY = '#ddd'

# Server configuration
DEBUG = True
PORT = 8052

# ==============================================
# END OF USER CONFIGURATION
# ==============================================

TABS = ['3D', 'Heatmap', 'Analytics', 'Interventions']

app = dash.Dash(__name__, suppress_callback_exceptions=True)
app.title = "CO₂ Digital Twin"

# Sources are loaded once; interventions and weather live in the browser
emission_sources = load_emission_sources(DATA_DIR / SOURCES_FILE)


def build_scenario(wind_speed, stability_class, interventions_data) -> ScenarioParameters:
    """Assemble scenario parameters from the current control values."""
    return ScenarioParameters(
        sources=emission_sources,
        interventions=[Intervention.from_dict(d) for d in interventions_data or []],
        wind_speed=INITIAL_WIND_SPEED if wind_speed is None else float(wind_speed),
        stability_class=stability_class or INITIAL_STABILITY_CLASS,
        grid_size=GRID_SIZE,
        cell_size=CELL_SIZE
    )


def emission_legend():
    """Legend of building colours for the 3D view."""
    min_rate, max_rate = emission_rate_range(emission_sources)
    return html.Div([
        html.H4('Emission Rate (kg/hr)', style={
            'margin': '0 0 10px 0', 'fontSize': '16px',
            'borderBottom': '1px solid #555', 'paddingBottom': '5px'
        }),
        html.Div(style={
            'height': '20px', 'borderRadius': '4px',
            'background': f'linear-gradient(to right, {EMISSION_LOW_COLOR}, '
                          f'{EMISSION_MID_COLOR}, {EMISSION_HIGH_COLOR})'
        }),
        html.Div([
            html.Span(f'{min_rate:.1f} (Low)'),
            html.Span(f'{(min_rate + max_rate) / 2:.1f}'),
            html.Span(f'{max_rate:.1f} (High)')
        ], style={'display': 'flex', 'justifyContent': 'space-between', 'marginTop': '5px', 'fontSize': '12px'})
    ], style={
        'position': 'absolute', 'bottom': '20px', 'left': '20px', 'zIndex': 10,
        'backgroundColor': PANEL_DARK, 'color': 'white', 'padding': '15px',
        'borderRadius': '8px', 'minWidth': '250px', 'fontSize': '14px'
    })


def intervention_panel(interventions, capture, costs):
    """Buttons to add each technology, and the list of placed interventions."""
    items = []
    for inter, captured, cost in zip(interventions, capture, costs):
        name = inter.technology.name if inter.technology else 'Unknown'
        items.append(html.Li(
            f'{name} at ({round(inter.x)}, {round(inter.y)}): '
            f'{captured * SECONDS_PER_HOUR:.2f} kg/hr captured, ${cost:.2f}/hr',
            style={'padding': '5px', 'borderBottom': '1px solid #eee'}
        ))

    return html.Div([
        html.H2('Manage Interventions'),
        html.Div([
            html.Button(
                f'Add {tech.name}',
                id={'type': 'add-intervention', 'tech': key},
                n_clicks=0,
                style={'marginRight': '10px', 'padding': '8px'}
            ) for key, tech in TECHNOLOGIES.items()
        ], style={'margin': '20px 0'}),
        html.H3('Placed Interventions:'),
        html.Ul(items, style={'listStyle': 'none'})
    ], style={'padding': '20px'})


def serve_layout():
    return html.Div([
        html.Div([
            dcc.Tabs(id='tabs', value='3D', children=[
                dcc.Tab(label=tab, value=tab, selected_style={
                    'fontWeight': 'bold', 'borderTop': f'2px solid {ACCENT_BLUE}'
                }) for tab in TABS
            ]),
            html.Div(id='tabs-content', style={'position': 'relative'})
        ], style={'flex': 3, 'position': 'relative'}),

        html.Div([
            html.H1('CO₂ Digital Twin'),
            html.Hr(style={'margin': '20px 0'}),

            html.Div([
                html.H3('Simulation Controls'),
                html.Label(id='wind-speed-label', htmlFor='wind-speed'),
                dcc.Slider(
                    id='wind-speed',
                    min=WIND_MIN, max=WIND_MAX, step=WIND_STEP,
                    value=INITIAL_WIND_SPEED,
                    marks={v: str(v) for v in (1, 5, 10, 15, 20)}
                )
            ], style={'marginBottom': '20px'}),

            html.Div([
                html.Label('Atmospheric Stability:', htmlFor='stability'),
                dcc.Dropdown(
                    id='stability',
                    options=[
                        {'label': f'{cls} - {STABILITY_LABELS[cls]}', 'value': cls}
                        for cls in STABILITY_CLASSES
                    ],
                    value=INITIAL_STABILITY_CLASS,
                    clearable=False
                )
            ], style={'marginBottom': '20px'}),

            html.Div([
                html.H3('Live Stats'),
                html.Div(id='live-stats')
            ], style={'marginBottom': '20px'})
        ], style={
            'flex': 1, 'backgroundColor': '#fff', 'padding': '20px',
            'overflowY': 'auto', 'borderLeft': f'1px solid {BORDER_GREY}'
        }),

        dcc.Store(id='interventions-store', data=[])
    ], style={'display': 'flex', 'height': '100vh', 'font-family': 'Arial, sans-serif'})


app.layout = serve_layout


def live_stats(result: ScenarioResult):
    return [
        html.P(f'Total Emission: {result.total_emissions_kg_h:.2f} kg/hr'),
        html.P(f'Total Capture: {result.total_capture_kg_h:.2f} kg/hr'),
        html.P(html.Strong(f'Net Emission: {result.net_emissions_kg_h:.2f} kg/hr'))
    ]


@app.callback(
    Output('wind-speed-label', 'children'),
    Input('wind-speed', 'value')
)
def update_wind_label(wind_speed):
    return f'Wind Speed: {wind_speed} m/s'


@app.callback(
    [Output('tabs-content', 'children'),
     Output('live-stats', 'children')],
    [Input('tabs', 'value'),
     Input('wind-speed', 'value'),
     Input('stability', 'value'),
     Input('interventions-store', 'data')]
)
def render_content(tab, wind_speed, stability_class, interventions_data):
    """Recompute the scenario and render the active tab."""
    params = build_scenario(wind_speed, stability_class, interventions_data)
    result = run_scenario(params)

    if tab == 'Heatmap':
        content = dcc.Graph(
            figure=create_heatmap_figure(result.grid),
            style={'height': '90vh'}
        )
    elif tab == 'Analytics':
        content = html.Div([
            dcc.Graph(figure=create_summary_bar_chart(result.total_emissions, result.total_capture)),
            dcc.Graph(figure=create_category_pie_chart(params.sources))
        ], style={'padding': '20px', 'display': 'flex', 'flexDirection': 'column', 'gap': '40px'})
    elif tab == 'Interventions':
        costs = intervention_costs_per_hour(params.interventions, result.capture_by_intervention)
        content = intervention_panel(params.interventions, result.capture_by_intervention, costs)
    else:
        children = [dcc.Graph(
            figure=create_city_figure(params.sources, params.interventions),
            style={'height': '90vh'}
        )]
        if params.sources:
            children.append(emission_legend())
        content = html.Div(children, style={'position': 'relative'})

    return content, live_stats(result)


@app.callback(
    Output('interventions-store', 'data'),
    Input({'type': 'add-intervention', 'tech': ALL}, 'n_clicks'),
    State('interventions-store', 'data'),
    prevent_initial_call=True
)
def handle_add_intervention(n_clicks, interventions_data):
    """Place an intervention of the clicked technology at a random position."""
    if not ctx.triggered_id or not any(n_clicks):
        return dash.no_update

    tech = ctx.triggered_id['tech']
    placed = make_random_intervention(tech, rng=np.random.default_rng())
    params = ScenarioParameters(
        interventions=[Intervention.from_dict(d) for d in interventions_data or []]
    )
    params = add_intervention(params, placed.type, placed.x, placed.y, id=placed.id)
    logger.info(f"Added {tech} at ({placed.x:.0f}, {placed.y:.0f})")
    return [inter.to_dict() for inter in params.interventions]


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=DEBUG, port=PORT)

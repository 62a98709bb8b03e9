# app.py — Dash app for the Human Development Index dashboard

import logging

import pandas as pd
from dash import Dash, dcc, html, Input, Output, State, ctx, no_update

from color_legend import make_color_legend
from config import DEFAULT_YEAR, INDICATOR_LABELS, INDICATOR_UNITS, INDICATORS, NOT_AVAILABLE, YEAR_MAX, YEAR_MIN
from data_prep import load_dataset
from line_chart import make_hdi_trend_chart
from map_view import make_hdi_map
from scatter_plot import make_gni_vs_hdi_scatter
from selection import SelectionState

logger = logging.getLogger(__name__)

INTRO = (
    "Welcome to our interactive dashboard on the Human Development Index (HDI). It is a composite "
    "index published by the United Nations Development Programme as a summary measure of average "
    "achievement in key dimensions of human development: a long and healthy life, being "
    "knowledgeable and having a decent standard of living. Explore Gross National Income, Life "
    "Expectancy and Expected Years of Schooling across countries to better understand global "
    "development trends."
)


# -------------------------
# Event dispatch: clicks + slider -> SelectionState
# -------------------------
def point_country(event_data) -> str | None:
    """ISO3 code of the first point in a clickData / hoverData payload."""
    if not event_data or not event_data.get("points"):
        return None
    point = event_data["points"][0]
    if point.get("location"):
        return point["location"]
    custom = point.get("customdata")
    return custom[0] if isinstance(custom, (list, tuple)) and custom else custom


def clicked_country(source: str, click_data) -> tuple[str | None, tuple[float, float] | None]:
    """ISO3 code and click position from a map or scatter clickData payload.

    The note is drawn over the map, so only map clicks carry a position.
    """
    iso = point_country(click_data)
    if iso is None or source != "hdi-map":
        return iso, None
    bbox = click_data["points"][0].get("bbox")
    position = (bbox["x0"], bbox["y0"]) if bbox else None
    return iso, position


def dispatch_event(trigger, state: SelectionState, dataset,
                   map_click=None, scatter_click=None, year=None) -> SelectionState | None:
    """Apply one UI event to the state. None means the event changed nothing."""
    if trigger == "ctl-year":
        if year is None:
            return None
        return state.change_year(year, dataset)

    if trigger in ("hdi-map", "gni-scatter"):
        payload = map_click if trigger == "hdi-map" else scatter_click
        iso, position = clicked_country(trigger, payload)
        if not iso:
            return None
        return state.toggle_select(iso, dataset, position)

    return None


# -------------------------
# Layout helpers
# -------------------------
def control_card(children, **style):
    return html.Div(
        children,
        style={
            "background":"#fff","border":"1px solid #e9ecef","borderRadius":"12px",
            "padding":"14px","boxShadow":"0 2px 8px rgba(0,0,0,0.04)", **style
        }
    )


def info_note(state: SelectionState):
    """Children + style for the floating country note."""
    info = state.country_info
    if not state.selected_country or not info.get("name"):
        return [], {"display": "none"}

    rows = [html.Strong(info["name"])]
    for ind in INDICATORS:
        value = info.get(ind, NOT_AVAILABLE)
        text = value if value == NOT_AVAILABLE else f"{value}{INDICATOR_UNITS[ind]}"
        rows.append(html.Div(
            [html.Span(f"{INDICATOR_LABELS[ind]}:"), html.Span(text, style={"marginLeft":"10px"})],
            style={"display":"flex","justifyContent":"space-between"}
        ))

    x, y = state.click_position or (10, 10)
    style = {
        "position":"absolute","left":f"{x}px","top":f"{y}px","maxWidth":"300px",
        "fontSize":"10px","background":"#d1ecf1","border":"1px solid #bee5eb",
        "borderRadius":"6px","padding":"8px","pointerEvents":"none",
    }
    return rows, style


def build_layout():
    return html.Div(
        [
            dcc.Store(id="selection", data=SelectionState().to_dict()),

            html.H2("Human Development Index (HDI)", style={"margin":"10px 0 8px 0"}),
            html.Div(INTRO),

            html.Div(
                [
                    # map + slider + legend
                    control_card([
                        html.H4("Human Development Index (HDI) by Country"),
                        html.Div(
                            [
                                dcc.Graph(
                                    id="hdi-map",
                                    config={"displayModeBar": False, "responsive": True},
                                    style={"width":"100%","height":"60vh"}
                                ),
                                html.Div(id="country-note", style={"display":"none"}),
                            ],
                            style={"position":"relative"}
                        ),
                        html.Div(id="year-readout", style={"marginTop":"6px","fontSize":"0.9rem"}),
                        dcc.Slider(
                            id="ctl-year",
                            min=YEAR_MIN, max=YEAR_MAX, step=1,
                            value=DEFAULT_YEAR,
                            marks={y: str(y) for y in range(YEAR_MIN, YEAR_MAX + 1, 5)},
                            tooltip={"placement":"bottom","always_visible":False}
                        ),
                        make_color_legend(),
                    ]),

                    # trend + scatter
                    html.Div(
                        [
                            control_card([
                                html.H4("Trend of HDI Over Time"),
                                dcc.Graph(
                                    id="hdi-trend",
                                    clear_on_unhover=True,
                                    config={"displayModeBar": False, "responsive": True},
                                    style={"width":"100%","height":"36vh"}
                                )
                            ]),
                            control_card([
                                html.H4("Relationship Between Gross National Income Per Capita and HDI"),
                                dcc.Graph(
                                    id="gni-scatter",
                                    clear_on_unhover=True,
                                    config={"displayModeBar": False, "responsive": True},
                                    style={"width":"100%","height":"36vh"}
                                )
                            ]),
                        ],
                        style={"display":"grid","gap":"14px"}
                    ),
                ],
                style={
                    "display":"grid",
                    "gridTemplateColumns":"7fr 5fr",
                    "gap":"14px",
                    "margin":"14px 0 18px 0"
                }
            ),
        ],
        style={"maxWidth":"1300px","margin":"0 auto","padding":"12px"}
    )


def serve_layout():
    # placeholder until both sources are in; a failed fetch leaves it there
    try:
        load_dataset()
    except (OSError, pd.errors.ParserError) as e:  # requests errors are OSErrors too
        logger.error(f"Could not load dashboard data: {e}")
        return html.Div("Loading...", id="loading")
    return build_layout()


app = Dash(__name__, suppress_callback_exceptions=True)
app.title = "Human Development Index (HDI)"
app.layout = serve_layout


# callbacks
@app.callback(
    Output("selection","data"),
    Output("hdi-map","clickData"),
    Output("gni-scatter","clickData"),
    Input("hdi-map","clickData"),
    Input("gni-scatter","clickData"),
    Input("ctl-year","value"),
    State("selection","data"),
    prevent_initial_call=True
)
def _update_selection(map_click, scatter_click, year, stored):
    state = dispatch_event(
        ctx.triggered_id,
        SelectionState.from_dict(stored),
        load_dataset(),
        map_click=map_click,
        scatter_click=scatter_click,
        year=year,
    )
    if state is None:
        return no_update, no_update, no_update
    # clear clickData so a second click on the same shape fires again
    return state.to_dict(), None, None


@app.callback(
    Output("hdi-map","figure"),
    Output("country-note","children"),
    Output("country-note","style"),
    Output("year-readout","children"),
    Input("selection","data"),
)
def _render_map(stored):
    state = SelectionState.from_dict(stored)
    fig_map = make_hdi_map(load_dataset(), state)
    note_children, note_style = info_note(state)
    return fig_map, note_children, note_style, f"Year: {state.selected_year}"


# hover only restyles the hovered line / dot; it never writes the selection
@app.callback(
    Output("hdi-trend","figure"),
    Input("selection","data"),
    Input("hdi-trend","hoverData"),
)
def _render_trend(stored, hover):
    return make_hdi_trend_chart(load_dataset(), SelectionState.from_dict(stored),
                                hovered=point_country(hover))


@app.callback(
    Output("gni-scatter","figure"),
    Input("selection","data"),
    Input("gni-scatter","hoverData"),
)
def _render_scatter(stored, hover):
    return make_gni_vs_hdi_scatter(load_dataset(), SelectionState.from_dict(stored),
                                   hovered=point_country(hover))


# expose server for hosts like Gunicorn
server = app.server

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=True)

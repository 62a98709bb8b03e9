from contextvars import copy_context

import pytest
from dash import no_update
from dash._callback_context import context_value
from dash._utils import AttributeDict

import app
import data_prep
from selection import SelectionState


def map_click(iso, bbox=None):
    point = {"location": iso, "curveNumber": 0, "pointNumber": 0}
    if bbox:
        point["bbox"] = bbox
    return {"points": [point]}


def scatter_click(iso):
    return {"points": [{"x": 64660, "y": 0.961, "customdata": [iso], "curveNumber": 0}]}


def test_map_click_selects(dataset):
    state = app.dispatch_event("hdi-map", SelectionState(), dataset,
                               map_click=map_click("NOR", {"x0": 40, "x1": 60, "y0": 12, "y1": 30}))
    assert state.selected_country == "NOR"
    assert state.click_position == (40, 12)
    assert state.country_info["HDI"] == "0.961"


def test_map_and_scatter_share_toggle(dataset):
    state = app.dispatch_event("hdi-map", SelectionState(), dataset, map_click=map_click("CHE"))
    state = app.dispatch_event("gni-scatter", state, dataset, scatter_click=scatter_click("CHE"))
    assert state.selected_country is None


def test_scatter_click_switches_selection(dataset):
    state = app.dispatch_event("hdi-map", SelectionState(), dataset, map_click=map_click("CHE"))
    state = app.dispatch_event("gni-scatter", state, dataset, scatter_click=scatter_click("TCD"))
    assert state.selected_country == "TCD"


def test_year_event_keeps_selection(dataset):
    state = app.dispatch_event("hdi-map", SelectionState(), dataset, map_click=map_click("NOR"))
    state = app.dispatch_event("ctl-year", state, dataset, year=2019)
    assert state.selected_country == "NOR"
    assert state.country_info["HDI"] == "0.959"


@pytest.mark.parametrize("trigger, kwargs", [
    ("hdi-map", {"map_click": None}),
    ("hdi-map", {"map_click": {"points": []}}),
    ("gni-scatter", {"scatter_click": None}),
    ("ctl-year", {"year": None}),
    ("something-else", {}),
])
def test_empty_events_change_nothing(dataset, trigger, kwargs):
    assert app.dispatch_event(trigger, SelectionState(), dataset, **kwargs) is None


def test_info_note_hidden_without_selection():
    children, style = app.info_note(SelectionState())
    assert children == []
    assert style == {"display": "none"}


def test_info_note_content(dataset):
    state = SelectionState().toggle_select("NOR", dataset, position=(5, 6))
    children, style = app.info_note(state)
    assert children[0].children == "Norway"
    values = [row.children[1].children for row in children[1:]]
    assert values == ["0.961", "64660$", "83.2 years", "18.2 years"]
    assert (style["left"], style["top"]) == ("5px", "6px")


def test_info_note_not_available(dataset):
    state = SelectionState().toggle_select("ATA", dataset)
    children, _ = app.info_note(state)
    assert [row.children[1].children for row in children[1:]] == ["N/A"] * 4


def test_layout_placeholder_on_failed_fetch(monkeypatch):
    def boom():
        raise OSError("network down")

    monkeypatch.setattr(app, "load_dataset", boom)
    layout = app.serve_layout()
    assert layout.id == "loading"
    assert layout.children == "Loading..."


def test_layout_once_loaded(monkeypatch, dataset):
    monkeypatch.setattr(app, "load_dataset", lambda: dataset)
    layout = app.serve_layout()
    store = layout.children[0]
    assert store.id == "selection"
    assert store.data == SelectionState().to_dict()


def test_malformed_year_aborts_layout(monkeypatch):
    def bad():
        raise ValueError("Indicator column without a 4-digit year")

    monkeypatch.setattr(app, "load_dataset", bad)
    with pytest.raises(ValueError):
        app.serve_layout()


def test_server_exposed():
    assert app.server is app.app.server


def test_loader_is_not_cached_after_failure(monkeypatch, raw_table, geo):
    attempts = []

    def flaky_table(url=data_prep.CSV_URL):
        attempts.append(url)
        if len(attempts) == 1:
            raise OSError("timed out")
        return raw_table

    monkeypatch.setattr(data_prep, "fetch_hdi_table", flaky_table)
    monkeypatch.setattr(data_prep, "fetch_geojson", lambda url=data_prep.GEOJSON_URL: geo)
    data_prep.load_dataset.cache_clear()
    try:
        with pytest.raises(OSError):
            data_prep.load_dataset()
        assert "NOR" in data_prep.load_dataset().countries
    finally:
        data_prep.load_dataset.cache_clear()


def test_scatter_click_has_no_note_position(dataset):
    click = scatter_click("NOR")
    click["points"][0]["bbox"] = {"x0": 400, "x1": 410, "y0": 200, "y1": 210}
    state = app.dispatch_event("gni-scatter", SelectionState(), dataset, scatter_click=click)
    assert state.selected_country == "NOR"
    assert state.click_position is None
    _, style = app.info_note(state)
    assert (style["left"], style["top"]) == ("10px", "10px")


# -------------------------
# Callbacks
# -------------------------
def run_triggered(prop_id, func, *args):
    def run():
        context_value.set(AttributeDict(**{"triggered_inputs": [{"prop_id": prop_id, "value": None}]}))
        return func(*args)

    return copy_context().run(run)


@pytest.fixture
def loaded(monkeypatch, dataset):
    monkeypatch.setattr(app, "load_dataset", lambda: dataset)
    return dataset


def test_update_selection_on_map_click(loaded):
    stored = SelectionState().to_dict()
    data, map_reset, scatter_reset = run_triggered(
        "hdi-map.clickData", app._update_selection, map_click("CHE"), None, 2021, stored)
    assert data["selected_country"] == "CHE"
    assert (map_reset, scatter_reset) == (None, None)


def test_update_selection_on_slider(loaded):
    stored = SelectionState().to_dict()
    data, _, _ = run_triggered("ctl-year.value", app._update_selection, None, None, 2019, stored)
    assert data["selected_year"] == 2019
    assert data["selected_country"] is None


def test_update_selection_ignores_empty_click(loaded):
    stored = SelectionState().to_dict()
    out = run_triggered("gni-scatter.clickData", app._update_selection, None, None, 2021, stored)
    assert out == (no_update, no_update, no_update)


def test_render_map_outputs(loaded):
    stored = SelectionState().toggle_select("NOR", loaded, position=(5, 6)).to_dict()
    fig, children, style, readout = app._render_map(stored)
    assert list(fig.data[0].locations) == ["NOR", "CHE", "TCD", "ATA"]
    assert children[0].children == "Norway"
    assert style["left"] == "5px"
    assert readout == "Year: 2021"


def test_render_trend_hover_restyles_line_only(loaded):
    stored = SelectionState().to_dict()
    before = dict(stored)
    hover = {"points": [{"curveNumber": 1, "x": 2021, "y": 0.962, "customdata": "CHE"}]}
    fig = app._render_trend(stored, hover)
    widths = {tr.name: tr.line.width for tr in fig.data}
    assert widths == {"NOR": 0.5, "TCD": 0.5, "CHE": 2.0}
    assert fig.data[-1].name == "CHE"
    assert stored == before

    # pointer left the chart
    fig = app._render_trend(stored, None)
    assert {tr.line.width for tr in fig.data} == {0.5}


def test_render_scatter_hover_restyles_dot_only(loaded):
    stored = SelectionState().to_dict()
    before = dict(stored)
    fig = app._render_scatter(stored, scatter_click("TCD"))
    trace = fig.data[0]
    assert trace.ids[-1] == "TCD"
    assert trace.marker.color[-1] == "red"
    assert list(trace.marker.color[:-1]) == ["grey", "grey"]
    assert stored == before

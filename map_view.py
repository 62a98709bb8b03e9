import numpy as np
import pandas as pd
import plotly.graph_objects as go

from color_scale import HDI_COLOR_SCALE
from config import MAP_FALLBACK_COLOR, MAP_OUTLINE_COLOR, NOT_AVAILABLE


def map_view_model(dataset, selection, scale=HDI_COLOR_SCALE) -> pd.DataFrame:
    """One row per country shape: iso3, name, hdi, fill, outline width, selected."""
    rows = []
    for feature in dataset.geo.get("features", []):
        iso = feature.get("id")
        if not iso:
            continue
        record = dataset.countries.get(iso)
        hdi = record.value("HDI", selection.selected_year) if record is not None else None
        selected = iso == selection.selected_country
        rows.append({
            "iso3": iso,
            "name": dataset.display_name(iso) or iso,
            "hdi": hdi,
            "fill": scale.color_or(hdi, MAP_FALLBACK_COLOR),
            "line_width": 2.0 if selected else 0.5,
            "selected": selected,
        })
    return pd.DataFrame(rows, columns=["iso3", "name", "hdi", "fill", "line_width", "selected"])


def _identity_colorscale(colors):
    #z = row index, so every shape gets exactly its own fill
    if len(colors) == 1:
        return [[0.0, colors[0]], [1.0, colors[0]]]
    last = len(colors) - 1
    return [[i / last, c] for i, c in enumerate(colors)]


def make_hdi_map(dataset, selection, scale=HDI_COLOR_SCALE) -> go.Figure:
    vm = map_view_model(dataset, selection, scale)

    # blank map
    if vm.empty:
        fig = go.Figure()
        fig.update_layout(template="plotly_white", title="No data")
        return fig

    hdi_txt = [NOT_AVAILABLE if pd.isna(v) else f"{v:.3f}" for v in vm["hdi"]]
    fig = go.Figure(go.Choropleth(
        geojson=dataset.geo,
        featureidkey="id",
        locations=vm["iso3"],
        z=np.arange(len(vm)),
        zmin=0,
        zmax=max(len(vm) - 1, 1),
        colorscale=_identity_colorscale(vm["fill"].tolist()),
        showscale=False,
        marker=dict(line=dict(color=MAP_OUTLINE_COLOR, width=vm["line_width"].tolist())),
        hovertext=vm["name"],
        customdata=np.array(hdi_txt, dtype=object).reshape(-1, 1),
        hovertemplate="<b>%{hovertext}</b><br>HDI: %{customdata[0]}<extra></extra>",
    ))
    fig.update_geos(
        projection_type="mercator",
        showframe=False,
        showcoastlines=False,
        visible=False,
        lataxis_range=[-60, 85],
    )
    fig.update_layout(
        template="plotly_white",
        margin=dict(t=10, r=0, l=0, b=0),
        uirevision="map",
        clickmode="event",
    )
    return fig

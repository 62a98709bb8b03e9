import numpy as np
import pandas as pd
import plotly.graph_objects as go

from color_scale import HDI_COLOR_SCALE
from config import MAP_FALLBACK_COLOR, TREND_END_YEAR, YEAR_MAX, YEAR_MIN


def line_segments(years, values) -> list[list[tuple[int, float]]]:
    """Split a series into runs of defined points; an absent year ends a run."""
    segments, run = [], []
    for yr, val in zip(years, values):
        if val is None or (isinstance(val, float) and np.isnan(val)):
            if run:
                segments.append(run)
            run = []
        else:
            run.append((int(yr), float(val)))
    if run:
        segments.append(run)
    return segments


def trend_view_model(dataset, selection, scale=HDI_COLOR_SCALE, hovered=None) -> pd.DataFrame:
    """One row per country: the HDI series over the full year range plus stroke attributes.

    The selected line and the hovered line (if any) are drawn emphasised.
    """
    years = list(range(YEAR_MIN, YEAR_MAX + 1))
    long_df = dataset.long_frame
    need = long_df[long_df["indicator"] == "HDI"]

    # pivot the data
    isos = list(dataset.countries.keys())
    if need.empty:
        wide = pd.DataFrame(np.nan, index=isos, columns=years)
    else:
        wide = (
            need.pivot_table(index="iso3", columns="year", values="value", aggfunc="first")
            .reindex(index=isos, columns=years)
        )

    rows = []
    for iso, series in wide.iterrows():
        values = [None if pd.isna(v) else float(v) for v in series.tolist()]
        end_value = dataset.countries[iso].value("HDI", TREND_END_YEAR)
        selected = iso == selection.selected_country
        emphasised = selected or iso == hovered
        rows.append({
            "iso3": iso,
            "name": dataset.countries[iso].country_name,
            "years": years,
            "values": values,
            "segments": line_segments(years, values),
            "stroke": scale.color_or(end_value, MAP_FALLBACK_COLOR),
            "width": 2.0 if emphasised else 0.5,
            "opacity": 1.0 if emphasised else 0.2,
            "selected": selected,
            "hovered": iso == hovered,
        })
    return pd.DataFrame(rows, columns=["iso3", "name", "years", "values", "segments",
                                       "stroke", "width", "opacity", "selected", "hovered"])


def make_hdi_trend_chart(dataset, selection, scale=HDI_COLOR_SCALE, hovered=None) -> go.Figure:
    vm = trend_view_model(dataset, selection, scale, hovered)

    # blank chart
    vm = vm[vm["segments"].map(len) > 0]
    if vm.empty:
        fig = go.Figure()
        fig.update_layout(template="plotly_white", title="No data")
        return fig

    fig = go.Figure()
    # emphasised lines drawn last so they sit on top
    order = vm.assign(_top=vm["selected"] | vm["hovered"]).sort_values("_top", kind="stable")
    for _, row in order.iterrows():
        fig.add_trace(go.Scatter(
            x=row["years"],
            y=row["values"],
            mode="lines",
            connectgaps=False,
            name=row["iso3"],
            hovertext=row["name"],
            customdata=[row["iso3"]] * len(row["years"]),
            line=dict(color=row["stroke"], width=row["width"]),
            opacity=row["opacity"],
            hovertemplate="<b>%{hovertext}</b><br>Year: %{x}<br>HDI: %{y:.3f}<extra></extra>",
            showlegend=False,
        ))

    # ISO label at the selected country's last defined point
    sel = vm[vm["selected"]]
    if not sel.empty:
        last_year, last_value = sel.iloc[0]["segments"][-1][-1]
        fig.add_annotation(
            x=last_year, y=last_value,
            text=f"<b>{sel.iloc[0]['iso3']}</b>",
            showarrow=False, xanchor="left", xshift=5,
            font=dict(size=11, color="black"),
        )

    fig.update_layout(
        template="plotly_white",
        hovermode="closest",
        margin=dict(t=20, r=30, l=60, b=30),
        xaxis=dict(title="Year", range=[YEAR_MIN, YEAR_MAX], dtick=5),
        yaxis=dict(title="Human Development Index Level", range=[0, 1]),
    )
    return fig

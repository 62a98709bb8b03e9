import pandas as pd
import plotly.graph_objects as go

from config import DOT_COLOR, SELECTED_DOT_COLOR


def scatter_view_model(dataset, selection, hovered=None) -> pd.DataFrame:
    """GNI vs HDI for the selected year; countries missing either value are left out.

    The hovered point turns red with a red outline until the pointer leaves it.
    """
    year = selection.selected_year
    long_df = dataset.long_frame
    df = long_df[(long_df["year"] == year) & (long_df["indicator"].isin(["GNI", "HDI"]))]
    if df.empty:
        return pd.DataFrame(columns=["iso3", "country", "GNI", "HDI", "selected", "hovered",
                                     "color", "size", "stroke_width"])

    # pivot the data
    wide = (
        df.pivot_table(index=["iso3", "country"], columns="indicator", values="value", aggfunc="first")
        .reindex(columns=["GNI", "HDI"])
        .reset_index()
        .dropna(subset=["GNI", "HDI"])
    )
    wide.columns.name = None

    wide["selected"] = wide["iso3"] == selection.selected_country
    wide["hovered"] = wide["iso3"] == hovered
    emphasised = wide["selected"] | wide["hovered"]
    wide["color"] = emphasised.map({True: SELECTED_DOT_COLOR, False: DOT_COLOR})
    wide["size"] = 6
    wide.loc[wide["hovered"], "size"] = 8
    wide.loc[wide["selected"], "size"] = 10
    wide["stroke_width"] = emphasised.map({True: 2, False: 0})
    return wide.reset_index(drop=True)


def make_gni_vs_hdi_scatter(dataset, selection, hovered=None) -> go.Figure:
    vm = scatter_view_model(dataset, selection, hovered)

    # blank chart
    if vm.empty:
        fig = go.Figure()
        fig.update_layout(template="plotly_white", title=f"No data for {selection.selected_year}")
        return fig

    x_max = float(vm["GNI"].max())

    fig = go.Figure()
    # hovered point last so it is drawn on top
    others = vm[~vm["selected"]].sort_values("hovered", kind="stable")
    fig.add_trace(go.Scatter(
        x=others["GNI"], y=others["HDI"],
        mode="markers",
        ids=others["iso3"],
        customdata=others[["iso3"]].to_numpy(),
        hovertext=others["country"],
        marker=dict(color=others["color"], size=others["size"],
                    line=dict(color=SELECTED_DOT_COLOR, width=others["stroke_width"])),
        hovertemplate="<b>%{hovertext}</b><br>GNI: %{x:,.0f}<br>HDI: %{y:.3f}<extra></extra>",
        showlegend=False,
    ))

    sel = vm[vm["selected"]]
    if not sel.empty:
        fig.add_trace(go.Scatter(
            x=sel["GNI"], y=sel["HDI"],
            mode="markers+text",
            ids=sel["iso3"],
            customdata=sel[["iso3"]].to_numpy(),
            hovertext=sel["country"],
            text=[f"<b>{iso}</b>" for iso in sel["iso3"]],
            textposition="middle right",
            marker=dict(color=sel["color"], size=sel["size"],
                        line=dict(color=SELECTED_DOT_COLOR, width=2)),
            hovertemplate="<b>%{hovertext}</b><br>GNI: %{x:,.0f}<br>HDI: %{y:.3f}<extra></extra>",
            showlegend=False,
        ))

    fig.update_layout(
        template="plotly_white",
        hovermode="closest",
        margin=dict(t=20, r=20, l=60, b=40),
        xaxis=dict(title="Gross National Income Per Capita", range=[0, x_max]),
        yaxis=dict(title="Human Development Index Level", range=[0, 1]),
        clickmode="event",
    )
    return fig

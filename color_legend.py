from dash import html

from color_scale import HDI_COLOR_SCALE


def legend_stops(scale=HDI_COLOR_SCALE, count: int = 10) -> list[tuple[float, str]]:
    """(offset %, colour) gradient stops at the scale's nice ticks."""
    ticks = scale.ticks(count)
    if len(ticks) == 1:
        return [(0.0, scale(ticks[0])), (100.0, scale(ticks[0]))]
    last = len(ticks) - 1
    return [(round(i / last * 100, 2), scale(t)) for i, t in enumerate(ticks)]


def legend_gradient(scale=HDI_COLOR_SCALE, count: int = 10) -> str:
    stops = ", ".join(f"{color} {offset}%" for offset, color in legend_stops(scale, count))
    return f"linear-gradient(to right, {stops})"


def make_color_legend(scale=HDI_COLOR_SCALE, width: int = 300, height: int = 20,
                      title: str = "HDI Value Level") -> html.Div:
    lo, hi = scale.domain[0], scale.domain[-1]
    small = {"fontSize": "10px", "fontWeight": "bold"}
    return html.Div(
        [
            html.Div(title, style={"textAlign": "center", "fontSize": "12px", "fontWeight": "bold"}),
            html.Div(
                [html.Span("low", style=small), html.Span("high", style=small)],
                style={"display": "flex", "justifyContent": "space-between"}
            ),
            html.Div(
                id="legend-swatch",
                style={"width": f"{width}px", "height": f"{height}px",
                       "background": legend_gradient(scale)}
            ),
            html.Div(
                [html.Span(f"{lo * 100:.2f}%"), html.Span(f"{hi * 100:.2f}%")],
                style={"display": "flex", "justifyContent": "space-between", "fontSize": "10px"}
            ),
        ],
        style={"width": f"{width}px", "marginTop": "8px"}
    )

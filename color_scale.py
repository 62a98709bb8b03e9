import math

import numpy as np

from config import HDI_BREAKPOINTS, HDI_COLORS


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    c = color.lstrip("#")
    if len(c) == 3:
        c = "".join(ch * 2 for ch in c)
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def _tick_step(start: float, stop: float, count: int) -> tuple[float, float]:
    #d3-style nice step; returned as (step, inverse) so negative powers stay exact
    raw = (stop - start) / max(count, 1)
    power = math.floor(math.log10(raw))
    error = raw / 10 ** power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    if power >= 0:
        step = factor * 10 ** power
        return step, 1 / step
    inv = 10 ** -power / factor
    return 1 / inv, inv


class LinearColorScale:
    """Piecewise-linear value -> colour map over fixed breakpoints.

    Values outside the domain extrapolate along the first/last segment,
    with each RGB channel clamped to [0, 255].
    """

    def __init__(self, domain, colors):
        if len(domain) != len(colors) or len(domain) < 2:
            raise ValueError("domain and colors need the same length (at least 2)")
        self.domain = [float(d) for d in domain]
        self.colors = list(colors)
        self._rgb = np.array([hex_to_rgb(c) for c in colors], dtype=float)

    def segment(self, value: float) -> int:
        """Index i of the segment [domain[i], domain[i+1]] used for value."""
        i = int(np.searchsorted(self.domain, value, side="right")) - 1
        return min(max(i, 0), len(self.domain) - 2)

    def rgb(self, value: float) -> tuple[int, int, int]:
        i = self.segment(value)
        d0, d1 = self.domain[i], self.domain[i + 1]
        t = (value - d0) / (d1 - d0)
        mixed = self._rgb[i] + t * (self._rgb[i + 1] - self._rgb[i])
        r, g, b = np.clip(np.round(mixed), 0, 255).astype(int)
        return int(r), int(g), int(b)

    def __call__(self, value: float) -> str:
        r, g, b = self.rgb(float(value))
        return f"rgb({r}, {g}, {b})"

    def color_or(self, value, fallback: str) -> str:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return fallback
        return self(value)

    def ticks(self, count: int = 10) -> list[float]:
        start, stop = self.domain[0], self.domain[-1]
        _, inv = _tick_step(start, stop, count)
        lo, hi = math.ceil(round(start * inv, 9)), math.floor(round(stop * inv, 9))
        return [i / inv for i in range(lo, hi + 1)]


# shared by the map, the line chart and the legend
HDI_COLOR_SCALE = LinearColorScale(HDI_BREAKPOINTS, HDI_COLORS)

"""Selection state shared by the map, the scatter plot and the line chart.

The state is a plain struct: views read it, and only ``toggle_select`` and
``change_year`` write it. Dash keeps the ``to_dict`` form in a ``dcc.Store``
between events.
"""

import logging
from dataclasses import dataclass, field

from config import (
    DEFAULT_YEAR,
    INDICATOR_DECIMALS,
    INDICATORS,
    NOT_AVAILABLE,
    YEAR_MAX,
    YEAR_MIN,
)

logger = logging.getLogger(__name__)


def clamp_year(year) -> int:
    return min(max(int(year), YEAR_MIN), YEAR_MAX)


def format_indicator(indicator: str, value) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{float(value):.{INDICATOR_DECIMALS[indicator]}f}"


def describe_country(dataset, iso: str, year: int) -> dict:
    """Name + the four indicator values at `year`, formatted for display."""
    record = dataset.countries.get(iso)
    info = {"name": dataset.display_name(iso)}
    for ind in INDICATORS:
        value = record.value(ind, year) if record is not None else None
        info[ind] = format_indicator(ind, value)
    return info


@dataclass
class SelectionState:
    selected_country: str | None = None
    selected_year: int = DEFAULT_YEAR
    country_info: dict = field(default_factory=dict)
    click_position: tuple[float, float] | None = None

    def toggle_select(self, iso: str, dataset, position=None) -> "SelectionState":
        # clicking the selected country again clears it
        if iso == self.selected_country:
            logger.debug(f"Cleared selection of {iso}")
            self.selected_country = None
            self.country_info = {}
            self.click_position = None
            return self

        self.selected_country = iso
        self.country_info = describe_country(dataset, iso, self.selected_year)
        self.click_position = tuple(position) if position is not None else None
        logger.debug(f"Selected {iso} at {self.selected_year}")
        return self

    def change_year(self, year, dataset) -> "SelectionState":
        self.selected_year = clamp_year(year)
        if self.selected_country is not None:
            self.country_info = describe_country(dataset, self.selected_country, self.selected_year)
        return self

    def to_dict(self) -> dict:
        return {
            "selected_country": self.selected_country,
            "selected_year": self.selected_year,
            "country_info": dict(self.country_info),
            "click_position": list(self.click_position) if self.click_position is not None else None,
        }

    @classmethod
    def from_dict(cls, data) -> "SelectionState":
        if not data:
            return cls()
        pos = data.get("click_position")
        return cls(
            selected_country=data.get("selected_country"),
            selected_year=clamp_year(data.get("selected_year", DEFAULT_YEAR)),
            country_info=dict(data.get("country_info") or {}),
            click_position=tuple(pos) if pos else None,
        )

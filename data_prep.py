import logging
import re
from dataclasses import dataclass, field
from functools import cached_property, lru_cache

import pandas as pd
import requests

from config import (
    CSV_URL,
    GEOJSON_URL,
    INDICATOR_FRAGMENTS,
    INDICATORS,
    ISO_COLUMN,
    NAME_COLUMN,
    REQUEST_TIMEOUT,
    YEAR_PATTERN,
)

logger = logging.getLogger(__name__)


@dataclass
class CountryRecord:
    """One country's four indicator series, keyed by year. Absent values are None."""
    country_name: str
    hdi: dict[int, float | None] = field(default_factory=dict)
    gni: dict[int, float | None] = field(default_factory=dict)
    leb: dict[int, float | None] = field(default_factory=dict)
    eys: dict[int, float | None] = field(default_factory=dict)

    def series(self, indicator: str) -> dict[int, float | None]:
        return getattr(self, indicator.lower())

    def value(self, indicator: str, year: int) -> float | None:
        return self.series(indicator).get(int(year))


@dataclass
class HDIDataset:
    countries: dict[str, CountryRecord]
    geo: dict
    names: dict[str, str]

    @cached_property
    def long_frame(self) -> pd.DataFrame:
        """Tidy frame of every present value, built once per dataset."""
        return to_long_frame(self.countries)

    def display_name(self, iso: str) -> str | None:
        #geojson name first, the csv name otherwise
        name = self.names.get(iso)
        if name:
            return name
        record = self.countries.get(iso)
        return record.country_name if record is not None else None


# -------------------------
# Reshape: wide rows -> {ISO3: CountryRecord}
# -------------------------
def classify_column(label: str) -> tuple[str, int] | None:
    """Return (indicator, year) for an indicator column, None for anything else.

    Raises ValueError when the label names an indicator but carries no
    4-digit parenthesized year.
    """
    for indicator, fragment in INDICATOR_FRAGMENTS.items():
        if fragment in label:
            match = re.search(YEAR_PATTERN, label)
            if match is None:
                raise ValueError(f"Indicator column without a 4-digit year: {label!r}")
            return indicator, int(match.group(1))
    return None


def _column_plan(columns) -> list[tuple[str, str, int]]:
    plan = []
    for col in columns:
        hit = classify_column(str(col))
        if hit is None:
            continue
        indicator, year = hit
        plan.append((str(col), indicator, year))

    #looser labels ("Life Expectancy at Birth, female (1990)") go first so
    #the plain "<indicator> (<year>)" column is the one that sticks
    def _exact(item):
        col, indicator, year = item
        return col.strip() == f"{INDICATOR_FRAGMENTS[indicator]} ({year})"

    return sorted(plan, key=_exact)


def reshape_rows(raw: pd.DataFrame) -> dict[str, CountryRecord]:
    raw = raw.reset_index(drop=True)
    plan = _column_plan(raw.columns)
    cols = [col for col, _, _ in plan]
    if not cols:
        logger.warning("No indicator columns found; countries will have empty series.")

    #blank / non-numeric -> NaN -> None, one dict of cells per row position
    cells_by_row = {}
    if cols:
        numeric = raw[cols].apply(pd.to_numeric, errors="coerce")
        numeric = numeric.astype(object).where(numeric.notna(), None)
        cells_by_row = numeric.to_dict("index")

    names = raw[NAME_COLUMN] if NAME_COLUMN in raw.columns else pd.Series("", index=raw.index)

    countries = {}
    for idx in raw.index:
        iso, name = raw.at[idx, ISO_COLUMN], names.at[idx]
        if pd.isna(iso) or not str(iso).strip():
            logger.warning(f"Skipping row without {ISO_COLUMN}: {name!r}")
            continue
        record = CountryRecord(country_name="" if pd.isna(name) else str(name))
        cells = cells_by_row.get(idx, {})
        for col, indicator, year in plan:
            cell = cells[col]
            record.series(indicator)[year] = None if cell is None else float(cell)
        countries[str(iso).strip()] = record

    logger.info(f"Reshaped {len(countries)} countries from {len(cols)} indicator columns.")
    return countries


def to_long_frame(countries: dict[str, CountryRecord]) -> pd.DataFrame:
    """Tidy frame: iso3, country, indicator, year, value (absent values dropped)."""
    rows = [
        {"iso3": iso, "country": rec.country_name, "indicator": ind, "year": yr, "value": val}
        for iso, rec in countries.items()
        for ind in INDICATORS
        for yr, val in rec.series(ind).items()
        if val is not None
    ]
    long_df = pd.DataFrame(rows, columns=["iso3", "country", "indicator", "year", "value"])
    return long_df.sort_values(["iso3", "indicator", "year"]).reset_index(drop=True)


# -------------------------
# Load
# -------------------------
def fetch_hdi_table(url: str = CSV_URL) -> pd.DataFrame:
    logger.info(f"Fetching HDI table from {url}")
    df = pd.read_csv(url)
    logger.info(f"Loaded HDI table with {len(df)} rows.")
    return df


def fetch_geojson(url: str = GEOJSON_URL) -> dict:
    logger.info(f"Fetching country shapes from {url}")
    resp = requests.get(url, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    geo = resp.json()
    logger.info(f"Loaded {len(geo.get('features', []))} country shapes.")
    return geo


def build_dataset(raw: pd.DataFrame, geo: dict) -> HDIDataset:
    names = {
        f["id"]: f.get("properties", {}).get("name")
        for f in geo.get("features", [])
        if f.get("id")
    }
    return HDIDataset(countries=reshape_rows(raw), geo=geo, names=names)


@lru_cache(maxsize=1)
def load_dataset() -> HDIDataset:
    """Fetch both sources once per process. Failures propagate and are not cached."""
    return build_dataset(fetch_hdi_table(), fetch_geojson())

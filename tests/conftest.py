import pandas as pd
import pytest

from data_prep import build_dataset


@pytest.fixture
def raw_table():
    return pd.DataFrame({
        "ISO3": ["NOR", "CHE", "TCD"],
        "Country": ["Norway", "Switzerland", "Chad"],
        "Continent": ["Europe", "Europe", "Africa"],
        "HDI Rank (2021)": [2, 1, 190],
        "Human Development Index (2019)": ["0.959", "0.962", "0.397"],
        "Human Development Index (2020)": ["0.959", "0.956", ""],
        "Human Development Index (2021)": ["0.961", "0.962", "0.394"],
        "Gross National Income Per Capita (2020)": ["63000", "", "1400"],
        "Gross National Income Per Capita (2021)": ["64660", "66933", "1364"],
        "Life Expectancy at Birth (2021)": ["83.2", "84.0", "52.5"],
        "Expected Years of Schooling (2021)": ["18.2", "16.5", "8.0"],
    })


@pytest.fixture
def geo():
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "id": "NOR", "properties": {"name": "Norway"},
             "geometry": {"type": "Polygon", "coordinates": [[[5, 58], [10, 58], [10, 62], [5, 58]]]}},
            {"type": "Feature", "id": "CHE", "properties": {"name": "Switzerland"},
             "geometry": {"type": "Polygon", "coordinates": [[[6, 46], [9, 46], [9, 47], [6, 46]]]}},
            {"type": "Feature", "id": "TCD", "properties": {"name": "Chad"},
             "geometry": {"type": "Polygon", "coordinates": [[[14, 8], [23, 8], [23, 23], [14, 8]]]}},
            {"type": "Feature", "id": "ATA", "properties": {"name": "Antarctica"},
             "geometry": {"type": "Polygon", "coordinates": [[[0, -80], [10, -80], [10, -70], [0, -80]]]}},
        ],
    }


@pytest.fixture
def dataset(raw_table, geo):
    return build_dataset(raw_table, geo)

# config.py

"""
Central settings for the HDI dashboard.
Data sources, the year range, indicator names and the shared colour encoding live here.
"""

# -------------------------
# Data sources (raw links)
# -------------------------
CSV_URL = "https://raw.githubusercontent.com/JenniferYao22/HDI-dataset/main/Human%20Development%20Index%20-%20Full.csv"
GEOJSON_URL = "https://gist.githubusercontent.com/hogwild/26558c07f9e4e89306f864412fbdba1d/raw/5458902712c01c79f36dc28db33e345ee71487eb/countries.geo.json"
REQUEST_TIMEOUT = 30  # seconds

ISO_COLUMN = "ISO3"
NAME_COLUMN = "Country"

# -------------------------
# Years
# -------------------------
YEAR_MIN, YEAR_MAX = 1990, 2021
DEFAULT_YEAR = 2021
TREND_END_YEAR = 2021  # line colour comes from this year's HDI

# -------------------------
# Indicators
# -------------------------
# key -> substring matched against the CSV column labels
INDICATOR_FRAGMENTS = {
    "HDI": "Human Development Index",
    "GNI": "Gross National Income Per Capita",
    "LEB": "Life Expectancy at Birth",
    "EYS": "Expected Years of Schooling",
}
INDICATORS = list(INDICATOR_FRAGMENTS.keys())

YEAR_PATTERN = r"\((\d{4})\)"

# pretty names + decimals for the info note
INDICATOR_LABELS = {
    "HDI": "Human Development Index",
    "GNI": "Gross National Income Per Capita",
    "LEB": "Life Expectancy at Birth",
    "EYS": "Expected Years of Schooling",
}
INDICATOR_DECIMALS = {"HDI": 3, "GNI": 0, "LEB": 1, "EYS": 1}
INDICATOR_UNITS = {"HDI": "", "GNI": "$", "LEB": " years", "EYS": " years"}
NOT_AVAILABLE = "N/A"

# -------------------------
# Colour encoding
# -------------------------
HDI_BREAKPOINTS = [0.3, 0.5, 0.6, 0.7, 0.85, 1.0]
HDI_COLORS = ["#bd1d1a", "#fb8c00", "#fdd835", "#12750e", "#1d1ac9", "#3457D5"]

MAP_FALLBACK_COLOR = "#ccc"
MAP_OUTLINE_COLOR = "#000"
DOT_COLOR = "grey"
SELECTED_DOT_COLOR = "red"

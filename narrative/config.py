# config.py
# Shared constants for the affordability narrative
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")

AFFORDABILITY_CSV = os.path.join(DATA_DIR, "Affordability_Wide_2018Q2_Public.csv")
GEOCODE_CSV = os.path.join(DATA_DIR, "region_geocodes.csv")
GEOCODE_VERSION = 1

# --- Column names (after normalization) ---
ID_COLS = ["region_id", "region_name", "size_rank"]
METRIC_COL = "index"
HIST_AVG_COL = "historic_average_1985thru1999"
JOIN_KEYS = ["region_id", "region_name", "size_rank", "date"]

# Source metric category -> joined column
METRICS = {
    "Price To Income": "price_to_income",
    "Mortgage Affordability": "mort_afford",
    "Rent Affordability": "rent_afford",
}
RATIO_COL = "price_to_income"
MORTGAGE_COL = "mort_afford"
RENT_COL = "rent_afford"

NATIONAL_REGION = "United States"

# --- Date range covered by the source ---
FIRST_YEAR = 1979
LAST_YEAR = 2018

# --- Section sizes ---
TOP_N_MAP = 25
SIZE_GROUP_N = 100
COMPARISON_SINCE = 2000
MAX_TREND_REGIONS = 3
RANKING_ROWS = 10
HISTOGRAM_BINS = 30

AFFORDABILITY_COLORS = {
    "price_to_income": "#1f77b4",
    "mort_afford": "#E57373",
    "rent_afford": "#4CAF50",
}

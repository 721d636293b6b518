# data_loader.py
# Reads the wide affordability export and the geocode lookup
import logging
import os
import re

import numpy as np
import pandas as pd

from config import (
    AFFORDABILITY_CSV,
    GEOCODE_CSV,
    GEOCODE_VERSION,
    HIST_AVG_COL,
    ID_COLS,
    METRIC_COL,
)

logger = logging.getLogger(__name__)

GEOCODE_COLUMNS = ["region_id", "region_name", "latitude", "longitude", "version"]


def is_month_label(name) -> bool:
    """Month columns are the ones whose label starts with a year."""
    return str(name)[:1].isdigit()


def clean_column_name(name: str) -> str:
    """RegionID -> region_id, HistoricAverage_1985thru1999 -> historic_average_1985thru1999."""
    s = str(name).strip()
    s = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", s)
    s = re.sub(r"[^0-9a-zA-Z]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s.lower()


def load_affordability_data(path: str = AFFORDABILITY_CSV) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Affordability data not found at {path}")

    df = pd.read_csv(path)
    df = df.rename(columns={c: clean_column_name(c) for c in df.columns if not is_month_label(c)})

    missing = [c for c in ID_COLS + [METRIC_COL] if c not in df.columns]
    if missing:
        raise KeyError(f"{os.path.basename(path)} is missing required columns: {missing}")

    if not any(is_month_label(c) for c in df.columns):
        raise ValueError(f"{os.path.basename(path)} has no monthly columns")

    if HIST_AVG_COL not in df.columns:
        logger.warning("No %s column in %s; historical averages will be empty", HIST_AVG_COL, path)
        df[HIST_AVG_COL] = np.nan

    df[METRIC_COL] = df[METRIC_COL].astype(str).str.strip()
    df["region_name"] = df["region_name"].astype(str).str.strip()

    logger.info("Loaded %d rows (%d regions) from %s", len(df), df["region_id"].nunique(), path)
    return df


def load_geocodes(path: str = GEOCODE_CSV, version: int = GEOCODE_VERSION) -> pd.DataFrame:
    """
    Loads the region geocode lookup and validates it.
    The table is keyed by region_id; region_name is only kept for reporting.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Geocode lookup not found at {path}. Run preprocess_geocodes.py first.")

    geo = pd.read_csv(path)
    geo.columns = [clean_column_name(c) for c in geo.columns]

    missing = [c for c in GEOCODE_COLUMNS if c not in geo.columns]
    if missing:
        raise KeyError(f"Geocode lookup is missing columns: {missing}")

    versions = pd.to_numeric(geo["version"], errors="coerce")
    if versions.isna().any() or (versions != version).any():
        found = sorted(set(geo["version"].astype(str)))
        raise ValueError(f"Geocode lookup version {found} does not match expected {version}")

    geo["latitude"] = pd.to_numeric(geo["latitude"], errors="coerce")
    geo["longitude"] = pd.to_numeric(geo["longitude"], errors="coerce")
    bad = geo[
        geo["latitude"].isna()
        | geo["longitude"].isna()
        | ~geo["latitude"].between(-90, 90)
        | ~geo["longitude"].between(-180, 180)
    ]
    if not bad.empty:
        raise ValueError(f"Invalid coordinates for region ids: {bad['region_id'].tolist()}")

    dupes = geo.loc[geo["region_id"].duplicated(), "region_id"]
    if not dupes.empty:
        raise ValueError(f"Duplicate region ids in geocode lookup: {dupes.tolist()}")

    geo["region_name"] = geo["region_name"].astype(str).str.strip()
    return geo[GEOCODE_COLUMNS].reset_index(drop=True)


def empty_geocodes() -> pd.DataFrame:
    return pd.DataFrame({
        "region_id": pd.Series(dtype="int64"),
        "region_name": pd.Series(dtype="object"),
        "latitude": pd.Series(dtype="float64"),
        "longitude": pd.Series(dtype="float64"),
        "version": pd.Series(dtype="int64"),
    })

# reshape.py
# Wide monthly columns -> long observations, and the metric join
import logging

import pandas as pd

from config import HIST_AVG_COL, ID_COLS, JOIN_KEYS, METRIC_COL, METRICS
from data_loader import is_month_label

logger = logging.getLogger(__name__)

LONG_COLUMNS = ID_COLS + ["metric", "historic_average", "date", "value"]


def month_columns(df: pd.DataFrame) -> list:
    return [c for c in df.columns if is_month_label(c)]


def parse_month(labels: pd.Series) -> pd.Series:
    """Parses "YYYY-MM" labels to month-start timestamps; raises ValueError on bad labels."""
    return pd.to_datetime(labels.astype(str), format="%Y-%m", errors="raise")


def to_long(wide: pd.DataFrame) -> pd.DataFrame:
    """
    One row per (region, metric, month). Values are passed through unchanged,
    so every wide cell maps to exactly one long row.
    """
    months = month_columns(wide)
    long = wide.melt(
        id_vars=ID_COLS + [METRIC_COL, HIST_AVG_COL],
        value_vars=months,
        var_name="date",
        value_name="value",
    )
    long = long.rename(columns={METRIC_COL: "metric", HIST_AVG_COL: "historic_average"})
    long["date"] = parse_month(long["date"])
    long = long.sort_values(ID_COLS + ["metric", "date"], kind="mergesort").reset_index(drop=True)
    return long[LONG_COLUMNS]


def split_by_metric(long: pd.DataFrame) -> dict:
    """Returns {joined column name: view} for each known metric category."""
    views = {}
    for category, col in METRICS.items():
        view = long[long["metric"] == category]
        views[col] = (
            view.drop(columns="metric")
                .rename(columns={"value": col, "historic_average": f"{col}_hist_avg"})
                .reset_index(drop=True)
        )
    unknown = sorted(set(long["metric"].unique()) - set(METRICS))
    if unknown:
        logger.warning("Ignoring unknown metric categories: %s", unknown)
    return views


def join_metrics(long: pd.DataFrame) -> pd.DataFrame:
    """
    Left-joins the three metric views on (region_id, region_name, size_rank, date).
    Keys must be unique within each view; rows missing from a joined-in view get NA.
    """
    views = split_by_metric(long)
    cols = list(METRICS.values())

    joined = views[cols[0]]
    for col in cols[1:]:
        joined = joined.merge(views[col], on=JOIN_KEYS, how="left", validate="one_to_one")

    for col in cols:
        joined[col] = joined[col].astype("Float64")
        joined[f"{col}_hist_avg"] = joined[f"{col}_hist_avg"].astype("Float64")

    unmatched = joined[cols].isna().any(axis=1).sum()
    if unmatched:
        logger.info("%d joined rows have at least one missing metric", unmatched)

    return joined.sort_values(JOIN_KEYS).reset_index(drop=True)

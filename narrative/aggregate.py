# aggregate.py
# Yearly averages and ranking tables built from the joined table
import logging

import numpy as np
import pandas as pd

from config import (
    COMPARISON_SINCE,
    NATIONAL_REGION,
    RANKING_ROWS,
    RATIO_COL,
    SIZE_GROUP_N,
    TOP_N_MAP,
)

logger = logging.getLogger(__name__)

MISSING_POLICIES = ("drop", "fail", "keep")


class MissingValueError(ValueError):
    """Raised when a consumer that cannot handle missing metrics receives them."""


def apply_missing_policy(frame: pd.DataFrame, columns, policy: str = "drop") -> pd.DataFrame:
    if policy not in MISSING_POLICIES:
        raise ValueError(f"Unknown missing-value policy {policy!r}; expected one of {MISSING_POLICIES}")

    columns = list(columns)
    mask = frame[columns].isna().any(axis=1)
    if policy == "fail" and mask.any():
        raise MissingValueError(f"{int(mask.sum())} rows have missing values in {columns}")
    if policy == "drop":
        return frame.loc[~mask].copy()
    return frame.copy()


def to_float(series: pd.Series) -> pd.Series:
    """Nullable Float64 -> float64 with NaN, which plotting libraries expect."""
    return pd.Series(series.to_numpy(dtype="float64", na_value=np.nan), index=series.index, name=series.name)


def regional(joined: pd.DataFrame) -> pd.DataFrame:
    return joined[joined["region_name"] != NATIONAL_REGION]


def yearly_average(frame: pd.DataFrame, metric: str = RATIO_COL, by=("year", "region_name")) -> pd.DataFrame:
    """
    Mean of the non-missing monthly values of `metric` per group.
    `year` is derived from `date` when it is requested and not already present.
    """
    by = list(by)
    df = frame
    if "year" in by and "year" not in df.columns:
        df = df.assign(year=df["date"].dt.year)

    df = apply_missing_policy(df, [metric], policy="drop")
    out = df.groupby(by, as_index=False).agg(**{metric: (metric, "mean")})
    out[metric] = to_float(out[metric])
    return out


def top_regions_yearly(joined: pd.DataFrame, n: int = TOP_N_MAP) -> pd.DataFrame:
    """Yearly average price-to-income for the n largest regions by size rank."""
    ranks = regional(joined)[["region_id", "size_rank"]].drop_duplicates("region_id")
    top_ids = ranks.nsmallest(n, "size_rank")["region_id"]
    top = joined[joined["region_id"].isin(top_ids)]
    return yearly_average(top, RATIO_COL, by=("year", "region_id", "region_name", "size_rank"))


def all_regions_yearly(joined: pd.DataFrame) -> pd.DataFrame:
    return yearly_average(regional(joined), RATIO_COL, by=("year", "region_id", "region_name"))


def size_comparison_yearly(joined: pd.DataFrame, n: int = SIZE_GROUP_N, since: int = COMPARISON_SINCE) -> pd.DataFrame:
    """Yearly average price-to-income across the n largest vs the n smallest regions."""
    ranks = regional(joined)[["region_id", "size_rank"]].drop_duplicates("region_id")
    groups = {
        f"Largest {n}": ranks.nsmallest(n, "size_rank")["region_id"],
        f"Smallest {n}": ranks.nlargest(n, "size_rank")["region_id"],
    }
    overlap = set(groups[f"Largest {n}"]) & set(groups[f"Smallest {n}"])
    if overlap:
        logger.warning(
            "Largest and smallest %d groups share %d of %d regions; the comparison lines will overlap",
            n, len(overlap), len(ranks),
        )

    recent = joined[joined["date"].dt.year >= since]
    frames = []
    for label, ids in groups.items():
        part = recent[recent["region_id"].isin(ids)].assign(group=label)
        frames.append(part)

    combined = pd.concat(frames, ignore_index=True)
    return yearly_average(combined, RATIO_COL, by=("year", "group"))


def national_trend(joined: pd.DataFrame) -> pd.DataFrame:
    cols = ["date", RATIO_COL, f"{RATIO_COL}_hist_avg"]
    trend = joined.loc[joined["region_name"] == NATIONAL_REGION, cols].copy()
    if trend.empty:
        logger.warning("No %s rows found for the national trend", NATIONAL_REGION)
    for col in cols[1:]:
        trend[col] = to_float(trend[col])
    return trend.reset_index(drop=True)


def ranking_table(joined: pd.DataFrame, date=None, n: int = RANKING_ROWS, ascending: bool = False) -> pd.DataFrame:
    """
    Regions ranked by price-to-income at `date` (latest month when omitted).
    ascending=False lists the least affordable regions first.
    """
    df = apply_missing_policy(regional(joined), [RATIO_COL], policy="drop")
    if df.empty:
        return pd.DataFrame(columns=["region_name", "size_rank", RATIO_COL, "mort_afford", "rent_afford"])

    date = df["date"].max() if date is None else pd.Timestamp(date)
    snap = df[df["date"] == date]
    snap = snap.sort_values(RATIO_COL, ascending=ascending).head(n)

    table = snap[["region_name", "size_rank", RATIO_COL, "mort_afford", "rent_afford"]].copy()
    for col in [RATIO_COL, "mort_afford", "rent_afford"]:
        table[col] = to_float(table[col])
    return table.reset_index(drop=True)

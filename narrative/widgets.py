# widgets.py
# Input -> filtered view -> figure. Every call recomputes from the shared tables.
import numpy as np
import pandas as pd

from aggregate import apply_missing_policy, to_float
from config import (
    FIRST_YEAR,
    HISTOGRAM_BINS,
    LAST_YEAR,
    MAX_TREND_REGIONS,
    MORTGAGE_COL,
    RATIO_COL,
    RENT_COL,
)
from plots import (
    empty_figure,
    make_affordability_plot,
    make_bubble_map,
    make_histogram,
    make_region_trend_plot,
)


def year_in_range(year) -> bool:
    return year is not None and FIRST_YEAR <= int(year) <= LAST_YEAR


def view_region_trend(joined: pd.DataFrame, regions) -> pd.DataFrame:
    regions = list(regions or [])
    if len(regions) > MAX_TREND_REGIONS:
        raise ValueError(f"Select at most {MAX_TREND_REGIONS} regions (got {len(regions)})")

    view = joined.loc[joined["region_name"].isin(regions), ["region_name", "date", RATIO_COL]]
    view = apply_missing_policy(view, [RATIO_COL], policy="drop")
    view[RATIO_COL] = to_float(view[RATIO_COL])
    return view.reset_index(drop=True)


def view_region_detail(joined: pd.DataFrame, region: str) -> pd.DataFrame:
    """Long frame (date, measure, percent) with mortgage and rent shares for one region."""
    if not isinstance(region, str) or not region:
        raise ValueError("Select exactly one region")

    view = joined.loc[joined["region_name"] == region, ["date", MORTGAGE_COL, RENT_COL]]
    view = view.rename(columns={MORTGAGE_COL: "Mortgage", RENT_COL: "Rent"})
    long = view.melt(id_vars="date", var_name="measure", value_name="percent")
    long = apply_missing_policy(long, ["percent"], policy="drop")
    long["percent"] = to_float(long["percent"]) * 100
    return long.reset_index(drop=True)


def view_year_map(top_yearly: pd.DataFrame, year=None) -> pd.DataFrame:
    """Top regions with coordinates for one year; every year when `year` is None."""
    if year is None:
        view = top_yearly
    elif not year_in_range(year):
        return top_yearly.iloc[0:0].copy()
    else:
        view = top_yearly[top_yearly["year"] == int(year)]
    view = apply_missing_policy(view, [RATIO_COL, "latitude", "longitude"], policy="drop")
    return view.sort_values(["year", "size_rank"]).reset_index(drop=True)


def view_year_histogram(all_yearly: pd.DataFrame, year=None) -> pd.DataFrame:
    if year is None:
        view = all_yearly
    elif not year_in_range(year):
        return all_yearly.iloc[0:0].copy()
    else:
        view = all_yearly[all_yearly["year"] == int(year)]
    view = apply_missing_policy(view, [RATIO_COL], policy="drop")
    return view.sort_values(["year", "region_name"]).reset_index(drop=True)


HISTOGRAM_COLUMNS = ["bucket_start", "bucket_end", "bucket_mid", "count"]


def histogram_counts(view: pd.DataFrame, bins: int = HISTOGRAM_BINS, by=()) -> pd.DataFrame:
    """
    Number of regions per ratio bucket, optionally per group (e.g. year).
    Bucket edges span the whole view so every group shares them; a view with a
    single distinct value gets a bucket range padded by 0.5 on each side.
    """
    by = list(by)
    if view.empty:
        return pd.DataFrame(columns=by + HISTOGRAM_COLUMNS)

    lo, hi = float(view[RATIO_COL].min()), float(view[RATIO_COL].max())
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    edges = np.linspace(lo, hi, bins + 1)

    groups = view.groupby(by, sort=True) if by else [((), view)]
    rows = []
    for key, part in groups:
        key = key if isinstance(key, tuple) else (key,)
        counts, _ = np.histogram(part[RATIO_COL].to_numpy(dtype="float64"), bins=edges)
        for start, end, count in zip(edges[:-1], edges[1:], counts):
            row = dict(zip(by, key))
            row.update(bucket_start=start, bucket_end=end, bucket_mid=(start + end) / 2, count=int(count))
            rows.append(row)
    return pd.DataFrame(rows, columns=by + HISTOGRAM_COLUMNS)


# ---------- Rendering ----------

def render_region_trend(tables, filters):
    view = view_region_trend(tables.joined, filters.get("regions"))
    if view.empty:
        return empty_figure("Select up to three regions to compare.")
    return make_region_trend_plot(view)


def render_region_detail(tables, filters):
    region = filters.get("region")
    view = view_region_detail(tables.joined, region)
    if view.empty:
        return empty_figure(f"No affordability data for {region}.")
    return make_affordability_plot(view, region)


def render_year_map(tables, filters):
    animated = filters.get("animated", False)
    view = view_year_map(tables.top_yearly, None if animated else filters.get("year"))
    if view.empty:
        return empty_figure("No mapped regions for the selected year.", height=600)
    return make_bubble_map(view, animated=animated)


def render_year_histogram(tables, filters):
    animated = filters.get("animated", False)
    view = view_year_histogram(tables.all_yearly, None if animated else filters.get("year"))
    if view.empty:
        return empty_figure("No regions for the selected year.")
    by = ["year"] if animated else []
    return make_histogram(histogram_counts(view, by=by), animated=animated)


WIDGETS = {
    "region_trend": render_region_trend,
    "region_detail": render_region_detail,
    "year_map": render_year_map,
    "year_histogram": render_year_histogram,
}


def render(view: str, tables, filters=None):
    if view not in WIDGETS:
        raise KeyError(f"Unknown widget {view!r}; expected one of {sorted(WIDGETS)}")
    return WIDGETS[view](tables, dict(filters or {}))

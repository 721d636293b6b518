# pipeline.py
# load -> reshape -> join -> aggregate, built once per session
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from aggregate import (
    all_regions_yearly,
    national_trend,
    size_comparison_yearly,
    top_regions_yearly,
)
from config import AFFORDABILITY_CSV, GEOCODE_CSV
from data_loader import empty_geocodes, load_affordability_data, load_geocodes
from geocode import GeocodeReport, attach_coordinates
from reshape import join_metrics, to_long

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NarrativeTables:
    """Read-only inputs shared by every section of the page."""
    joined: pd.DataFrame
    national: pd.DataFrame
    top_yearly: pd.DataFrame       # top regions with coordinates, feeds the map
    all_yearly: pd.DataFrame       # every region, feeds the histogram
    comparison: pd.DataFrame       # largest vs smallest regions
    geocode_report: GeocodeReport

    @property
    def regions(self) -> list:
        return sorted(self.joined["region_name"].unique())

    @property
    def years(self) -> list:
        return sorted(self.joined["date"].dt.year.unique())


def build_tables(wide: pd.DataFrame, geocodes: Optional[pd.DataFrame] = None) -> NarrativeTables:
    long = to_long(wide)
    joined = join_metrics(long)

    if geocodes is None:
        geocodes = empty_geocodes()
    top_yearly, report = attach_coordinates(top_regions_yearly(joined), geocodes)

    tables = NarrativeTables(
        joined=joined,
        national=national_trend(joined),
        top_yearly=top_yearly,
        all_yearly=all_regions_yearly(joined),
        comparison=size_comparison_yearly(joined),
        geocode_report=report,
    )
    logger.info(
        "Built narrative tables: %d joined rows, %d regions, %s",
        len(joined), joined["region_id"].nunique(), report.summary(),
    )
    return tables


def load_tables(data_path: str = AFFORDABILITY_CSV, geocode_path: Optional[str] = GEOCODE_CSV) -> NarrativeTables:
    wide = load_affordability_data(data_path)
    geocodes = load_geocodes(geocode_path) if geocode_path else None
    return build_tables(wide, geocodes)

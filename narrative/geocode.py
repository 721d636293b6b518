# geocode.py
# Attaches map coordinates to regions via the versioned geocode lookup
import logging
from dataclasses import dataclass, field
from typing import List

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeReport:
    matched: List[int] = field(default_factory=list)
    unmatched: List[int] = field(default_factory=list)     # in the data, not in the lookup
    unused: List[int] = field(default_factory=list)        # in the lookup, not in the data
    renamed: List[int] = field(default_factory=list)       # same id, different region_name

    @property
    def ok(self) -> bool:
        return not self.unmatched

    def summary(self) -> str:
        parts = [f"{len(self.matched)} regions geocoded"]
        if self.unmatched:
            parts.append(f"{len(self.unmatched)} without coordinates: {self.unmatched}")
        if self.unused:
            parts.append(f"{len(self.unused)} unused lookup rows")
        if self.renamed:
            parts.append(f"{len(self.renamed)} with renamed regions: {self.renamed}")
        return "; ".join(parts)


def attach_coordinates(yearly: pd.DataFrame, geocodes: pd.DataFrame):
    """
    Inner-joins regional rows to the lookup on region_id.
    Regions without coordinates are dropped from the result and listed in the report.
    """
    data_ids = set(yearly["region_id"].unique())
    geo_ids = set(geocodes["region_id"].unique())

    names = yearly[["region_id", "region_name"]].drop_duplicates("region_id")
    both = names.merge(geocodes[["region_id", "region_name"]], on="region_id", suffixes=("", "_geo"))
    renamed = both.loc[both["region_name"] != both["region_name_geo"], "region_id"]

    report = GeocodeReport(
        matched=sorted(int(i) for i in data_ids & geo_ids),
        unmatched=sorted(int(i) for i in data_ids - geo_ids),
        unused=sorted(int(i) for i in geo_ids - data_ids),
        renamed=sorted(int(i) for i in renamed),
    )
    if not report.ok or report.renamed:
        logger.warning("Geocode lookup: %s", report.summary())

    located = yearly.merge(
        geocodes[["region_id", "latitude", "longitude"]],
        on="region_id",
        how="inner",
        validate="many_to_one",
    )
    return located, report

import pandas as pd
import pytest

from data_loader import load_affordability_data
from reshape import join_metrics, to_long

MONTHS = ["2017-11", "2017-12", "2018-01", "2018-02"]

REGIONS = [
    (102001, "United States", 0),
    (394913, "New York, NY", 1),
    (753899, "Los Angeles-Long Beach-Anaheim, CA", 2),
    (394463, "Chicago, IL", 3),
]

PRICE_TO_INCOME = {
    102001: [3.4, 3.5, 3.6, 3.7],
    394913: [4.0, None, 4.4, 4.6],
    753899: [7.0, 7.2, 7.4, 7.6],
    394463: [2.9, 3.0, 3.1, 3.2],
}

HIST_AVG = {"Price To Income": 2.9, "Mortgage Affordability": 0.21, "Rent Affordability": 0.26}

# Chicago has no rent series
NO_RENT = 394463


def metric_values(metric, region_id, rank):
    if metric == "Price To Income":
        return PRICE_TO_INCOME[region_id]
    if metric == "Mortgage Affordability":
        return [round(0.10 + 0.01 * rank + 0.005 * i, 4) for i in range(len(MONTHS))]
    return [round(0.25 + 0.01 * rank + 0.002 * i, 4) for i in range(len(MONTHS))]


@pytest.fixture
def raw_wide():
    rows = []
    for region_id, name, rank in REGIONS:
        for metric, hist in HIST_AVG.items():
            if metric == "Rent Affordability" and region_id == NO_RENT:
                continue
            row = {
                "RegionID": region_id,
                "RegionName": name,
                "SizeRank": rank,
                "Index": metric,
                "HistoricAverage_1985thru1999": hist,
            }
            row.update(dict(zip(MONTHS, metric_values(metric, region_id, rank))))
            rows.append(row)
    return pd.DataFrame(rows)


@pytest.fixture
def affordability_csv(tmp_path, raw_wide):
    path = tmp_path / "affordability.csv"
    raw_wide.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def wide(affordability_csv):
    return load_affordability_data(affordability_csv)


@pytest.fixture
def long(wide):
    return to_long(wide)


@pytest.fixture
def joined(long):
    return join_metrics(long)


@pytest.fixture
def geocode_frame():
    # Chicago is left out on purpose; 999 is not in the data
    return pd.DataFrame({
        "region_id": [394913, 753899, 999],
        "region_name": ["New York, NY", "Los Angeles-Long Beach-Anaheim, CA", "Nowhere, ZZ"],
        "latitude": [40.7128, 34.0522, 45.0],
        "longitude": [-74.006, -118.2437, -100.0],
        "version": [1, 1, 1],
    })


@pytest.fixture
def geocode_csv(tmp_path, geocode_frame):
    path = tmp_path / "geocodes.csv"
    geocode_frame.to_csv(path, index=False)
    return str(path)

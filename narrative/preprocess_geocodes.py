# preprocess_geocodes.py
# One-time step: builds the versioned region geocode lookup used by the map.
# Run: python narrative/preprocess_geocodes.py
import os

import pandas as pd
import pgeocode

from config import AFFORDABILITY_CSV, GEOCODE_CSV, GEOCODE_VERSION, NATIONAL_REGION, TOP_N_MAP
from data_loader import load_affordability_data


def split_region_name(name: str):
    """Splits "Dallas-Fort Worth, TX" into ("Dallas", "TX"); (name, None) without a state suffix."""
    if "," not in name:
        return name.strip(), None
    city, state = name.rsplit(",", 1)
    city = city.split("-")[0].strip()
    state = state.strip().split("-")[0].strip()
    return city, state


def geocode_region(nomi, name: str):
    city, state = split_region_name(name)
    places = nomi.query_location(city)
    if places is None or len(places) == 0:
        return None, None
    if state is not None:
        places = places[places["state_code"] == state]
    places = places.dropna(subset=["latitude", "longitude"])
    if places.empty:
        return None, None
    return float(places["latitude"].mean()), float(places["longitude"].mean())


def build_geocodes(wide: pd.DataFrame, n: int = TOP_N_MAP) -> pd.DataFrame:
    regions = (
        wide.loc[wide["region_name"] != NATIONAL_REGION, ["region_id", "region_name", "size_rank"]]
            .drop_duplicates("region_id")
            .nsmallest(n, "size_rank")
    )

    nomi = pgeocode.Nominatim("us")
    rows = []
    for region in regions.itertuples(index=False):
        lat, lon = geocode_region(nomi, region.region_name)
        if lat is None:
            print(f"  ✗ No match for {region.region_name} ({region.region_id})")
            continue
        rows.append({
            "region_id": region.region_id,
            "region_name": region.region_name,
            "latitude": round(lat, 4),
            "longitude": round(lon, 4),
            "version": GEOCODE_VERSION,
        })
        print(f"  ✓ {region.region_name} → ({lat:.3f}, {lon:.3f})")
    return pd.DataFrame(rows)


def main():
    print(f"Loading {AFFORDABILITY_CSV}...")
    wide = load_affordability_data(AFFORDABILITY_CSV)
    print(f"Geocoding top {TOP_N_MAP} regions...")
    geocodes = build_geocodes(wide)
    os.makedirs(os.path.dirname(GEOCODE_CSV), exist_ok=True)
    geocodes.to_csv(GEOCODE_CSV, index=False)
    print(f"Saved {len(geocodes)} regions → {GEOCODE_CSV} (version {GEOCODE_VERSION})")


if __name__ == "__main__":
    main()

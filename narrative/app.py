# app.py
# Housing affordability narrative
# Run: streamlit run narrative/app.py
import logging

import streamlit as st

from aggregate import ranking_table
from config import (
    AFFORDABILITY_CSV,
    COMPARISON_SINCE,
    GEOCODE_CSV,
    LAST_YEAR,
    MAX_TREND_REGIONS,
    NATIONAL_REGION,
    RATIO_COL,
    SIZE_GROUP_N,
    TOP_N_MAP,
)
from data_loader import load_affordability_data, load_geocodes
from pipeline import build_tables
from plots import make_national_trend_plot, make_size_comparison_plot
from widgets import render

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ---------- Global config ----------
st.set_page_config(page_title="Housing Affordability, 1979-2018", layout="wide")
st.title("Housing Affordability, 1979-2018")


# --- Cached Data Loading Functions ---
@st.cache_data(ttl=24*3600)
def cached_tables():
    wide = load_affordability_data(AFFORDABILITY_CSV)
    try:
        geocodes = load_geocodes(GEOCODE_CSV)
    except FileNotFoundError:
        geocodes = None
    return build_tables(wide, geocodes)


# ---------- Load data ----------
with st.spinner("Loading affordability data…"):
    try:
        tables = cached_tables()
    except FileNotFoundError as e:
        st.error(f"🔴 CRITICAL: {e}")
        st.stop()

if not tables.geocode_report.ok:
    st.warning(f"Geocode lookup incomplete: {tables.geocode_report.summary()}. Those regions are left off the map.")


# ----------------------------------------------------
#               I. The national picture
# ----------------------------------------------------
st.markdown(
    """
    How much of a household's income does a home cost? The **price-to-income ratio**
    divides the median home price by the median household income. **Mortgage** and
    **rent affordability** give the share of median monthly income spent on a mortgage
    payment or on rent.
    """
)

st.subheader(f"Price to Income Ratio, {NATIONAL_REGION}")
if tables.national.empty:
    st.info(f"No {NATIONAL_REGION} series in the dataset.")
else:
    st.plotly_chart(make_national_trend_plot(tables.national), use_container_width=True)


# ----------------------------------------------------
#               II. Rankings
# ----------------------------------------------------
latest = tables.joined["date"].max()
st.subheader(f"Where homes cost the most and least ({latest:%B %Y})")

col1, col2 = st.columns(2)
table_labels = {
    "region_name": "Region", "size_rank": "Size Rank", RATIO_COL: "Price to Income",
    "mort_afford": "Mortgage", "rent_afford": "Rent",
}
table_format = {"Price to Income": "{:.2f}", "Mortgage": "{:.1%}", "Rent": "{:.1%}"}
with col1:
    st.markdown("##### Least affordable")
    least = ranking_table(tables.joined, latest, ascending=False)
    st.dataframe(least.rename(columns=table_labels).style.format(table_format, na_rep="-"),
                 hide_index=True, use_container_width=True)
with col2:
    st.markdown("##### Most affordable")
    most = ranking_table(tables.joined, latest, ascending=True)
    st.dataframe(most.rename(columns=table_labels).style.format(table_format, na_rep="-"),
                 hide_index=True, use_container_width=True)


# ----------------------------------------------------
#               III. Region trends
# ----------------------------------------------------
st.subheader("Compare regions")
regions = tables.regions
default_regions = [r for r in [NATIONAL_REGION] if r in regions]
selected = st.multiselect(
    f"Pick up to {MAX_TREND_REGIONS} regions",
    regions,
    default=default_regions,
    max_selections=MAX_TREND_REGIONS,
    key="trend_regions",
)
st.plotly_chart(render("region_trend", tables, {"regions": selected}), use_container_width=True)

st.subheader("Mortgage or rent?")
detail_region = st.selectbox(
    "Region",
    regions,
    index=regions.index(NATIONAL_REGION) if NATIONAL_REGION in regions else 0,
    key="detail_region",
)
st.plotly_chart(render("region_detail", tables, {"region": detail_region}), use_container_width=True)


# ----------------------------------------------------
#               IV. Large vs small markets
# ----------------------------------------------------
st.subheader(f"The {SIZE_GROUP_N} largest vs the {SIZE_GROUP_N} smallest regions since {COMPARISON_SINCE}")
if tables.comparison.empty:
    st.info("Not enough regions for a size comparison.")
else:
    st.plotly_chart(make_size_comparison_plot(tables.comparison), use_container_width=True)


# ----------------------------------------------------
#               V. Map & distribution by year
# ----------------------------------------------------
years = tables.years
st.subheader(f"Top {TOP_N_MAP} regions by size")

map_col, hist_col = st.columns([3, 2])
with map_col:
    animate_map = st.toggle("Animate over years", value=False, key="animate_map")
    map_year = st.slider(
        "Year", min_value=int(years[0]), max_value=int(years[-1]),
        value=min(int(years[-1]), LAST_YEAR), key="map_year", disabled=animate_map,
    )
    st.plotly_chart(
        render("year_map", tables, {"year": map_year, "animated": animate_map}),
        use_container_width=True,
    )

with hist_col:
    animate_hist = st.toggle("Animate over years", value=False, key="animate_hist")
    hist_year = st.slider(
        "Year", min_value=int(years[0]), max_value=int(years[-1]),
        value=min(int(years[-1]), LAST_YEAR), key="hist_year", disabled=animate_hist,
    )
    st.markdown("##### Average price to income across all regions")
    st.plotly_chart(
        render("year_histogram", tables, {"year": hist_year, "animated": animate_hist}),
        use_container_width=True,
    )

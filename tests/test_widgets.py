import pytest

from pipeline import build_tables
from widgets import (
    histogram_counts,
    render,
    view_region_detail,
    view_region_trend,
    view_year_histogram,
    view_year_map,
)


@pytest.fixture
def tables(wide, geocode_frame):
    return build_tables(wide, geocode_frame)


def test_region_trend_view(joined):
    view = view_region_trend(joined, ["New York, NY", "Chicago, IL"])
    assert set(view["region_name"]) == {"New York, NY", "Chicago, IL"}
    # the missing New York month is dropped
    assert len(view) == 7


def test_region_trend_rejects_more_than_three(joined):
    with pytest.raises(ValueError):
        view_region_trend(joined, ["a", "b", "c", "d"])


def test_region_detail_in_percent(joined):
    view = view_region_detail(joined, "New York, NY")
    assert set(view["measure"]) == {"Mortgage", "Rent"}
    first = view[view["measure"] == "Mortgage"].sort_values("date")["percent"].iloc[0]
    assert first == pytest.approx(11.0)


def test_region_detail_drops_missing_series(joined):
    view = view_region_detail(joined, "Chicago, IL")
    assert set(view["measure"]) == {"Mortgage"}


def test_region_detail_requires_region(joined):
    with pytest.raises(ValueError):
        view_region_detail(joined, None)


def test_region_detail_rejects_several_regions(joined):
    with pytest.raises(ValueError, match="exactly one region"):
        view_region_detail(joined, ["New York, NY", "Chicago, IL"])


def test_year_map_view(tables):
    view = view_year_map(tables.top_yearly, 2018)
    assert set(view["region_name"]) == {"New York, NY", "Los Angeles-Long Beach-Anaheim, CA"}


@pytest.mark.parametrize("year", [1975, 2019, 2050])
def test_year_outside_range_is_empty(tables, year):
    assert view_year_map(tables.top_yearly, year).empty
    assert view_year_histogram(tables.all_yearly, year).empty
    assert len(render("year_map", tables, {"year": year}).data) == 0
    assert len(render("year_histogram", tables, {"year": year}).data) == 0


def test_year_in_range_without_data_is_empty(tables):
    assert view_year_histogram(tables.all_yearly, 1990).empty


def test_histogram_counts(tables):
    view = view_year_histogram(tables.all_yearly, 2018)
    counts = histogram_counts(view, bins=3)
    assert len(counts) == 3
    assert counts["count"].sum() == 3
    assert counts["bucket_start"].iloc[0] == pytest.approx(view["price_to_income"].min())
    assert counts["bucket_end"].iloc[-1] == pytest.approx(view["price_to_income"].max())


def test_histogram_counts_share_buckets_across_years(tables):
    view = view_year_histogram(tables.all_yearly)
    counts = histogram_counts(view, bins=4, by=["year"])
    assert set(counts["year"]) == {2017, 2018}
    per_year = counts.groupby("year")["count"].sum()
    assert per_year[2017] == 3
    assert per_year[2018] == 3
    starts = counts.groupby("year")["bucket_start"].apply(list)
    assert starts[2017] == starts[2018]


def test_histogram_counts_single_value_is_padded(tables):
    view = view_year_histogram(tables.all_yearly, 2018)
    view = view[view["region_name"] == "Chicago, IL"]
    counts = histogram_counts(view, bins=2)
    assert counts["count"].sum() == 1
    assert counts["bucket_start"].iloc[0] == pytest.approx(3.15 - 0.5)
    assert counts["bucket_end"].iloc[-1] == pytest.approx(3.15 + 0.5)
    assert (counts["bucket_end"] > counts["bucket_start"]).all()


def test_histogram_counts_empty_view(tables):
    counts = histogram_counts(view_year_histogram(tables.all_yearly, 1975))
    assert counts.empty


def test_render_histogram_draws_bucket_counts(tables):
    fig = render("year_histogram", tables, {"year": 2018})
    assert fig.data[0].type == "bar"
    assert sum(fig.data[0].y) == 3


def test_render_map(tables):
    fig = render("year_map", tables, {"year": 2018})
    assert len(fig.data) == 1
    assert fig.data[0].type == "scattermap"
    assert len(fig.data[0].lat) == 2


def test_render_animated_map_has_a_frame_per_year(tables):
    fig = render("year_map", tables, {"animated": True})
    assert len(fig.frames) == 2


def test_render_animated_histogram(tables):
    fig = render("year_histogram", tables, {"animated": True})
    assert len(fig.frames) == 2


def test_render_region_trend(tables):
    fig = render("region_trend", tables, {"regions": ["New York, NY", "United States"]})
    assert len(fig.data) == 2


def test_render_region_trend_without_selection(tables):
    fig = render("region_trend", tables, {"regions": []})
    assert len(fig.data) == 0


def test_render_region_detail(tables):
    fig = render("region_detail", tables, {"region": "United States"})
    assert {trace.name for trace in fig.data} == {"Mortgage", "Rent"}


def test_render_unknown_widget(tables):
    with pytest.raises(KeyError):
        render("pie", tables, {})


def test_render_does_not_mutate_tables(tables):
    before = tables.joined.copy()
    render("region_trend", tables, {"regions": ["Chicago, IL"]})
    render("year_histogram", tables, {"year": 2018})
    assert tables.joined.equals(before)

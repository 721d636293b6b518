# plots.py
import plotly.express as px
import plotly.graph_objects as go

from config import AFFORDABILITY_COLORS, RATIO_COL

RATIO_LABEL = "Price to Income Ratio"


def empty_figure(message: str, height: int = 420) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, showarrow=False, x=0.5, y=0.5, xref="paper", yref="paper")
    fig.update_layout(
        height=height,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=20, r=20, t=40, b=20),
    )
    return fig


def make_national_trend_plot(national):
    fig = px.line(
        national,
        x="date",
        y=RATIO_COL,
        labels={"date": "Date", RATIO_COL: RATIO_LABEL},
        color_discrete_sequence=[AFFORDABILITY_COLORS[RATIO_COL]],
        height=420,
    )
    hist_avg = national[f"{RATIO_COL}_hist_avg"].dropna()
    if not hist_avg.empty:
        fig.add_hline(
            y=float(hist_avg.iloc[0]),
            line_dash="dash",
            line_color="gray",
            annotation_text="1985-1999 average",
            annotation_position="bottom right",
        )
    fig.update_layout(margin=dict(l=20, r=20, t=40, b=20))
    return fig


def make_region_trend_plot(view):
    fig = px.line(
        view,
        x="date",
        y=RATIO_COL,
        color="region_name",
        labels={"date": "Date", RATIO_COL: RATIO_LABEL, "region_name": "Region"},
        height=450,
    )
    fig.update_layout(
        margin=dict(l=20, r=20, t=40, b=20),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5),
    )
    return fig


def make_affordability_plot(view, region: str):
    """Mortgage vs rent share of income for one region, in percent."""
    fig = px.line(
        view,
        x="date",
        y="percent",
        color="measure",
        color_discrete_map={
            "Mortgage": AFFORDABILITY_COLORS["mort_afford"],
            "Rent": AFFORDABILITY_COLORS["rent_afford"],
        },
        labels={"date": "Date", "percent": "% of Median Income", "measure": ""},
        title=f"{region}: Mortgage vs Rent Affordability",
        height=450,
    )
    fig.update_layout(margin=dict(l=20, r=20, t=60, b=20))
    return fig


def make_size_comparison_plot(comparison):
    fig = px.line(
        comparison,
        x="year",
        y=RATIO_COL,
        color="group",
        markers=True,
        labels={"year": "Year", RATIO_COL: f"Average {RATIO_LABEL}", "group": "Regions"},
        height=420,
    )
    fig.update_layout(margin=dict(l=20, r=20, t=40, b=20))
    return fig


def make_bubble_map(view, animated: bool = False):
    """
    One marker per region, sized and colored by the yearly average ratio.
    Marker sizes are scaled by plotly (size_max); the ratio itself is not normalized.
    """
    ratios = view[RATIO_COL]
    fig = px.scatter_map(
        view,
        lat="latitude",
        lon="longitude",
        size=RATIO_COL,
        color=RATIO_COL,
        hover_name="region_name",
        hover_data={RATIO_COL: ":.2f", "latitude": False, "longitude": False},
        animation_frame="year" if animated else None,
        animation_group="region_name" if animated else None,
        color_continuous_scale="RdYlGn_r",
        range_color=(float(ratios.min()), float(ratios.max())),
        size_max=30,
        opacity=0.7,
        map_style="carto-positron",
        zoom=2.8,
        center={"lat": 39.8283, "lon": -98.5795},
        labels={RATIO_COL: RATIO_LABEL, "year": "Year"},
        height=600,
    )
    fig.update_layout(margin={"r": 0, "t": 0, "l": 0, "b": 0})
    return fig


def make_histogram(counts, animated: bool = False):
    """
    Bars over precomputed bucket counts (see widgets.histogram_counts).
    Buckets are shared across years so animation frames line up.
    """
    fig = px.bar(
        counts,
        x="bucket_mid",
        y="count",
        animation_frame="year" if animated else None,
        hover_data={"bucket_start": ":.2f", "bucket_end": ":.2f", "bucket_mid": False},
        range_y=(0, max(1, int(counts["count"].max())) * 1.1),
        color_discrete_sequence=[AFFORDABILITY_COLORS[RATIO_COL]],
        labels={
            "bucket_mid": f"Average {RATIO_LABEL}",
            "bucket_start": "From",
            "bucket_end": "To",
            "count": "Number of Regions",
            "year": "Year",
        },
        height=420,
    )
    fig.update_layout(
        bargap=0.05,
        margin=dict(l=20, r=20, t=40, b=20),
    )
    return fig

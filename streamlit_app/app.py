from __future__ import annotations

import logging

import pandas as pd
import streamlit as st
import altair as alt

from sales_charts.aggregate.build_charts import build_chart_datasets
from sales_charts.config import get_settings
from sales_charts.format import (
    AXIS_LABEL,
    CHART_COLORS,
    LEGEND_LABEL,
    NO_CATEGORY_DATA,
    NO_PRODUCT_DATA,
    PIE_LABEL,
    color_for,
    currency_tick,
    format_money,
    truncate_label,
    truncate_label_expr,
)
from sales_charts.ingest.records import records_from_frame
from sales_charts.logging_config import configure_logging

log = logging.getLogger("sales_charts.dashboard")

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Sales Charts", layout="wide")
st.title("📊 Sales Dashboard")

try:
    settings = get_settings()
except RuntimeError as exc:
    st.error(str(exc))
    st.stop()

configure_logging(settings.log_path)

# =====================================================
# Helpers
# =====================================================
def axis_tick_expr() -> str:
    """Vega expression mirroring `currency_tick` for Altair axis labels."""
    return (
        "datum.value >= 1000 ? '$' + format(datum.value / 1000, '.1f') + 'k'"
        " : '$' + datum.value"
    )


def read_sales_csv(source) -> pd.DataFrame:
    """Read an uploaded file or configured path, keeping `date` as text.

    Args:
        source: Streamlit upload or filesystem path.

    Returns:
        pandas.DataFrame with the raw CSV rows.
    """
    return pd.read_csv(source, dtype={"date": str, "product": str, "category": str})


def chart_card(title: str, chart: alt.Chart | None, empty_message: str) -> None:
    """Render one chart under a subheader, or its empty-state message."""
    st.subheader(title)
    if chart is None:
        st.info(empty_message)
    else:
        st.altair_chart(chart, width="stretch")


# =====================================================
# Data source
# =====================================================
uploaded = st.file_uploader("Sales CSV (date, product, category, revenue)", type=["csv"])
source = uploaded if uploaded is not None else settings.sales_data_path

if source is None:
    st.info("Upload a sales CSV or set `SALES_DATA_PATH` in `.env` to see the charts.")
    st.stop()

try:
    raw = read_sales_csv(source)
except (OSError, ValueError) as exc:
    log.error("Unable to read sales data: %s", exc)
    st.error(f"Unable to read sales data: {exc}")
    st.stop()

records = records_from_frame(raw)
datasets = build_chart_datasets(records, top_n=settings.top_n_products)

st.caption(f"{len(records)} sales records")
st.divider()

# =====================================================
# SECTION 1 — SALES OVER TIME
# =====================================================
df_month = pd.DataFrame([m.model_dump() for m in datasets.monthly])
df_month["revenue_label"] = df_month["revenue"].map(lambda v: f"${format_money(v)}")

chart_month = (
    alt.Chart(df_month)
    .mark_area(
        line={"color": CHART_COLORS[0]},
        point={"color": CHART_COLORS[0]},
        color=alt.Gradient(
            gradient="linear",
            stops=[
                alt.GradientStop(color=CHART_COLORS[0], offset=0),
                alt.GradientStop(color="white", offset=1),
            ],
            x1=1, x2=1, y1=1, y2=0,
        ),
        interpolate="monotone",
    )
    .encode(
        x=alt.X(
            "month_name:N",
            sort=alt.SortField("month_number"),
            title=None,
            axis=alt.Axis(labelAngle=-35),
        ),
        y=alt.Y("revenue:Q", title="Revenue", axis=alt.Axis(labelExpr=axis_tick_expr())),
        tooltip=[alt.Tooltip("month_name:N", title="Month"), alt.Tooltip("revenue_label:N", title="Revenue")],
    )
    .properties(height=280)
)

c1, c2 = st.columns(2)
with c1:
    chart_card("Sales Over Time (by month)", chart_month, "")

# =====================================================
# SECTION 2 — TOP PRODUCTS
# =====================================================
chart_products = None
if datasets.products:
    df_prod = pd.DataFrame([p.model_dump() for p in datasets.products])
    df_prod["rank"] = range(len(df_prod))
    df_prod["revenue_label"] = df_prod["revenue"].map(lambda v: f"${format_money(v)}")
    df_prod["bar_label"] = df_prod["revenue"].map(currency_tick)

    bars = alt.Chart(df_prod).encode(
        x=alt.X("revenue:Q", title="Revenue", axis=alt.Axis(labelExpr=axis_tick_expr())),
        y=alt.Y(
            "product:N",
            sort=alt.SortField("rank"),
            title=None,
            axis=alt.Axis(labelExpr=truncate_label_expr(*AXIS_LABEL)),
        ),
        tooltip=[alt.Tooltip("product:N", title="Product"), alt.Tooltip("revenue_label:N", title="Total revenue")],
    )
    chart_products = (
        bars.mark_bar(color=CHART_COLORS[1], cornerRadiusEnd=4)
        + bars.mark_text(align="left", dx=4).encode(text="bar_label:N")
    ).properties(height=280)

with c2:
    chart_card(f"Total Sales by Product (Top {settings.top_n_products})", chart_products, NO_PRODUCT_DATA)

st.divider()

# =====================================================
# SECTION 3 — SALES BY CATEGORY
# =====================================================
chart_categories = None
if datasets.categories:
    df_cat = pd.DataFrame([c.model_dump() for c in datasets.categories])
    df_cat["slice_label"] = df_cat["category"].map(lambda v: truncate_label(v, *PIE_LABEL))
    df_cat["revenue_label"] = df_cat["revenue"].map(lambda v: f"${format_money(v)}")
    palette = [color_for(i) for i in range(len(df_cat))]

    base = alt.Chart(df_cat).encode(
        theta=alt.Theta("revenue:Q", stack=True),
        color=alt.Color(
            "category:N",
            sort=list(df_cat["category"]),
            scale=alt.Scale(domain=list(df_cat["category"]), range=palette),
            legend=alt.Legend(orient="bottom", title=None, labelExpr=truncate_label_expr(*LEGEND_LABEL)),
        ),
        tooltip=[alt.Tooltip("category:N", title="Category"), alt.Tooltip("revenue_label:N", title="Total revenue")],
    )
    chart_categories = (
        base.mark_arc(outerRadius=100, stroke="#fff", strokeWidth=2)
        + base.mark_text(radius=120).encode(text="slice_label:N")
    ).properties(height=280)

chart_card("Sales by Category", chart_categories, NO_CATEGORY_DATA)

# =====================================================
# Footer
# =====================================================
st.caption("Sales records • pandas • Dask • Streamlit • Altair")

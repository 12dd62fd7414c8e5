"""Chart dataset aggregation functions.

Functions in this module build the chart datasets from sales records. Each
function accepts `SalesRecord` instances or plain mappings, runs a single
pandas grouping pass over the cleaned frame, and returns a list of Pydantic
models ready for the presentation layer.

Expectations:
- Input: an ordered iterable of records; order decides group order and
  summation order, so equal input always yields identical output.
- Outputs: lists of `MonthlyRevenue`, `ProductRevenue` or `CategoryRevenue`
  as documented on each function.
- No record input raises: bad dates skip the monthly buckets, bad revenue
  counts as zero, and empty input gives zeroed months and empty lists.
"""
from __future__ import annotations

import functools
import logging
import operator
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import pandas as pd
from dask import delayed, compute  # type: ignore[attr-defined]

from sales_charts.clean.transform import MONTH_NAMES, clean_sales_frame
from sales_charts.ingest.records import coerce_records, records_to_frame
from sales_charts.models import CategoryRevenue, MonthlyRevenue, ProductRevenue, SalesRecord

log = logging.getLogger(__name__)

TOP_N_PRODUCTS = 8

RecordsIn = Iterable[SalesRecord | Mapping[str, Any]]


@dataclass(frozen=True)
class ChartDatasets:
    """The three datasets produced by one aggregation run."""
    monthly: list[MonthlyRevenue]
    products: list[ProductRevenue]
    categories: list[CategoryRevenue]


def _cleaned_frame(records: RecordsIn) -> pd.DataFrame:
    return clean_sales_frame(records_to_frame(coerce_records(records)))


def _ordered_sum(values: pd.Series) -> float:
    """Add `values` left to right, starting from 0.0, with no compensation."""
    return functools.reduce(operator.add, values.tolist(), 0.0)


def _monthly_from_frame(pdf: pd.DataFrame) -> list[MonthlyRevenue]:
    dated = pdf[pdf["month"].notna()]

    totals = (
        dated.groupby(dated["month"].astype(int), sort=True)["revenue"]
        .agg(_ordered_sum)
        .reindex(range(1, 13), fill_value=0.0)
    )
    log.debug("Monthly totals built from %d of %d rows", len(dated), len(pdf))

    return [
        MonthlyRevenue(
            month_number=month,
            month_name=MONTH_NAMES[month - 1],
            revenue=float(totals.loc[month]),
        )
        for month in range(1, 13)
    ]


def _products_from_frame(pdf: pd.DataFrame, top_n: int) -> list[ProductRevenue]:
    ranked = (
        pdf.groupby("product", sort=False)["revenue"]
        .agg(_ordered_sum)
        .sort_values(ascending=False, kind="stable")
        .head(top_n)
    )

    return [
        ProductRevenue(product=str(product), revenue=float(revenue))
        for product, revenue in ranked.items()
    ]


def _categories_from_frame(pdf: pd.DataFrame) -> list[CategoryRevenue]:
    totals = pdf.groupby("category_title", sort=False)["revenue"].agg(_ordered_sum)

    return [
        CategoryRevenue(category=str(category), revenue=float(revenue))
        for category, revenue in totals.items()
    ]


def _check_top_n(top_n: int) -> None:
    if top_n < 1:
        raise ValueError(f"top_n must be at least 1, got {top_n}")


# =========================================================
# MONTHLY TREND
# =========================================================

def monthly_revenue(records: RecordsIn) -> list[MonthlyRevenue]:
    """Return revenue per calendar month, January through December.

    Years are ignored, so `05-01-2023` and `05-01-2024` share a bucket.
    Records whose date yields no month are left out. Each bucket adds its
    revenues one at a time in input order.

    Args:
        records: Sales records in input order.

    Returns:
        Exactly 12 `MonthlyRevenue` entries ordered by `month_number`;
        months without sales carry 0.0.
    """
    return _monthly_from_frame(_cleaned_frame(records))


# =========================================================
# TOP PRODUCTS
# =========================================================

def top_product_revenue(records: RecordsIn, top_n: int = TOP_N_PRODUCTS) -> list[ProductRevenue]:
    """Return the `top_n` products by summed revenue.

    Products are grouped by exact name (the empty name is its own group) in
    order of first appearance, and each total is added up in input order.
    The descending sort is stable, so products with equal revenue stay in
    first-seen order.

    Args:
        records: Sales records in input order.
        top_n: Maximum number of products to return (default 8).

    Returns:
        `ProductRevenue` entries sorted by revenue, highest first.

    Raises:
        ValueError: if `top_n` is less than 1.
    """
    _check_top_n(top_n)
    return _products_from_frame(_cleaned_frame(records), top_n)


# =========================================================
# CATEGORY SHARE
# =========================================================

def category_revenue(records: RecordsIn) -> list[CategoryRevenue]:
    """Return revenue per normalized category, in order of first appearance.

    Categories are trimmed and title cased on the first character only, so
    `"tools"`, `" TOOLS"` and `"Tools"` all land in `"Tools"`. Blank
    categories form the `""` group. Every record counts; there is no date
    filter and no truncation.
    """
    return _categories_from_frame(_cleaned_frame(records))


# =========================================================
# ALL CHARTS
# =========================================================

def build_chart_datasets(
    records: RecordsIn,
    top_n: int = TOP_N_PRODUCTS,
    parallel: bool = False,
) -> ChartDatasets:
    """Compute all three chart datasets over the same records.

    The records are cleaned into a single frame that all three passes read.

    Args:
        records: Sales records in input order; consumed once.
        top_n: Maximum number of products in the product dataset.
        parallel: Run the three passes as dask tasks on the threaded
            scheduler. Results are identical to a sequential run.

    Returns:
        `ChartDatasets` bundling the monthly, product and category datasets.

    Raises:
        ValueError: if `top_n` is less than 1.
    """
    _check_top_n(top_n)
    pdf = _cleaned_frame(records)
    log.info("Building chart datasets for %d records (parallel=%s)", len(pdf), parallel)

    if parallel:
        monthly, products, categories = compute(
            delayed(_monthly_from_frame)(pdf),
            delayed(_products_from_frame)(pdf, top_n),
            delayed(_categories_from_frame)(pdf),
            scheduler="threads",
        )
    else:
        monthly = _monthly_from_frame(pdf)
        products = _products_from_frame(pdf, top_n)
        categories = _categories_from_frame(pdf)

    return ChartDatasets(monthly=monthly, products=products, categories=categories)

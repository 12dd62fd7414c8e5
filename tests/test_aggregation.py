from __future__ import annotations

import functools
import operator

import pandas as pd
import pytest

import sales_charts.aggregate.build_charts as build_charts
from sales_charts.aggregate.build_charts import (
    build_chart_datasets,
    category_revenue,
    monthly_revenue,
    top_product_revenue,
)
from sales_charts.clean.transform import MONTH_NAMES
from sales_charts.models import SalesRecord

EXAMPLE = [
    {"date": "05-01-2024", "product": "A", "category": "tools", "revenue": 100},
    {"date": "20-01-2023", "product": "A", "category": "Tools", "revenue": 50},
    {"date": "01-03-2024", "product": "B", "category": "toys", "revenue": 30},
]


def _monthly_map(rows: list[dict[str, object]]) -> dict[str, float]:
    return {m.month_name: m.revenue for m in monthly_revenue(rows)}


def test_monthly_revenue_worked_example() -> None:
    months = monthly_revenue(EXAMPLE)

    assert [m.month_number for m in months] == list(range(1, 13))
    assert [m.month_name for m in months] == MONTH_NAMES
    totals = {m.month_name: m.revenue for m in months}
    assert totals["January"] == 150.0
    assert totals["March"] == 30.0
    assert sum(totals.values()) == 180.0


def test_top_products_worked_example() -> None:
    products = top_product_revenue(EXAMPLE)
    assert [(p.product, p.revenue) for p in products] == [("A", 150.0), ("B", 30.0)]


def test_categories_worked_example() -> None:
    categories = category_revenue(EXAMPLE)
    assert [(c.category, c.revenue) for c in categories] == [("Tools", 150.0), ("Toys", 30.0)]


def test_empty_input_gives_zeroed_months_and_empty_lists() -> None:
    months = monthly_revenue([])
    assert len(months) == 12
    assert all(m.revenue == 0.0 for m in months)
    assert top_product_revenue([]) == []
    assert category_revenue([]) == []


def test_two_segment_date_only_skips_monthly_totals() -> None:
    rows = EXAMPLE + [{"date": "13-2024", "product": "C", "category": "garden", "revenue": 20}]

    assert sum(_monthly_map(rows).values()) == 180.0
    assert ("C", 20.0) in [(p.product, p.revenue) for p in top_product_revenue(rows)]
    assert sum(c.revenue for c in category_revenue(rows)) == 200.0


def test_missing_revenue_counts_as_zero() -> None:
    rows = [
        {"date": "01-02-2024", "product": "A", "category": "x"},
        {"date": "01-02-2024", "product": "A", "category": "x", "revenue": None},
        {"date": "01-02-2024", "product": "A", "category": "x", "revenue": "oops"},
        {"date": "01-02-2024", "product": "A", "category": "x", "revenue": 7},
    ]
    assert _monthly_map(rows)["February"] == 7.0
    assert [(p.product, p.revenue) for p in top_product_revenue(rows)] == [("A", 7.0)]
    assert [(c.category, c.revenue) for c in category_revenue(rows)] == [("X", 7.0)]


def test_empty_product_and_category_are_their_own_groups() -> None:
    rows = [
        {"date": "01-04-2024", "product": "", "category": "  ", "revenue": 5},
        {"date": "01-04-2024", "category": "Misc", "revenue": 3},
        {"date": "01-04-2024", "product": "P", "revenue": 1},
    ]
    assert [(p.product, p.revenue) for p in top_product_revenue(rows)] == [("", 8.0), ("P", 1.0)]
    assert [(c.category, c.revenue) for c in category_revenue(rows)] == [
        ("", 6.0),
        ("Misc", 3.0),
    ]


def test_top_products_truncates_and_keeps_first_seen_order_on_ties() -> None:
    rows = [
        {"date": "01-01-2024", "product": f"P{i}", "revenue": rev}
        for i, rev in enumerate([5, 10, 5, 10, 1, 5, 2, 3, 4, 10])
    ]
    products = top_product_revenue(rows)

    assert len(products) == 8
    assert [p.product for p in products] == ["P1", "P3", "P9", "P0", "P2", "P5", "P8", "P7"]
    revenues = [p.revenue for p in products]
    assert revenues == sorted(revenues, reverse=True)


def test_top_products_group_order_follows_first_occurrence() -> None:
    rows = [
        {"product": "late", "revenue": 1},
        {"product": "early", "revenue": 2},
        {"product": "late", "revenue": 1},
    ]
    assert [p.product for p in top_product_revenue(rows)] == ["late", "early"]


def test_top_products_custom_top_n() -> None:
    assert [p.product for p in top_product_revenue(EXAMPLE, top_n=1)] == ["A"]
    with pytest.raises(ValueError):
        top_product_revenue(EXAMPLE, top_n=0)


def test_category_grouping_is_case_insensitive() -> None:
    rows = [
        {"category": "home decor", "revenue": 1},
        {"category": "HOME DECOR ", "revenue": 2},
        {"category": "Home Decor", "revenue": 3},
    ]
    assert [(c.category, c.revenue) for c in category_revenue(rows)] == [("Home decor", 6.0)]


def test_category_total_matches_monthly_total_when_dates_valid() -> None:
    rows = [
        {"date": f"0{d}-{m:02d}-202{d}", "product": f"P{m % 3}", "category": c, "revenue": m * 1.5}
        for d, (m, c) in enumerate(
            [(1, "a"), (2, "B"), (12, "a"), (7, "c"), (2, "b"), (11, "")], start=1
        )
    ]
    total = sum(r["revenue"] for r in rows)
    assert sum(m.revenue for m in monthly_revenue(rows)) == pytest.approx(total)
    assert sum(c.revenue for c in category_revenue(rows)) == pytest.approx(total)


def test_accepts_models_and_generators() -> None:
    records = (SalesRecord.model_validate(r) for r in EXAMPLE)
    datasets = build_chart_datasets(records)

    assert len(datasets.monthly) == 12
    assert [p.product for p in datasets.products] == ["A", "B"]


def test_parallel_run_matches_sequential() -> None:
    sequential = build_chart_datasets(EXAMPLE)
    parallel = build_chart_datasets(EXAMPLE, parallel=True)

    assert parallel == sequential


def test_repeated_runs_are_identical() -> None:
    assert build_chart_datasets(EXAMPLE) == build_chart_datasets(EXAMPLE)


def _added_in_order(values: list[float]) -> float:
    return functools.reduce(operator.add, values, 0.0)


@pytest.mark.parametrize("values", [[0.1] * 10, [1e16, 1.0, 1.0], [0.1, 0.2, 0.3, -0.6, 1e-17]])
def test_totals_add_revenue_left_to_right(values: list[float]) -> None:
    rows = [
        {"date": "15-06-2024", "product": "P", "category": "c", "revenue": v}
        for v in values
    ]
    expected = _added_in_order(values)

    assert _monthly_map(rows)["June"] == expected
    assert top_product_revenue(rows)[0].revenue == expected
    assert category_revenue(rows)[0].revenue == expected


def test_ten_tenths_sum_below_one() -> None:
    rows = [{"date": "01-01-2024", "product": "A", "revenue": 0.1}] * 10
    assert _monthly_map(rows)["January"] == 0.9999999999999999


def test_top_products_rank_on_uncompensated_totals() -> None:
    rows = [{"product": "A", "revenue": 0.1}] * 10 + [{"product": "B", "revenue": 1.0}]
    products = top_product_revenue(rows)

    assert [(p.product, p.revenue) for p in products] == [("B", 1.0), ("A", 0.9999999999999999)]


def test_totals_follow_input_order_within_each_group() -> None:
    rows = [
        {"date": "01-02-2024", "product": "X", "category": "k", "revenue": 1e16},
        {"date": "01-03-2024", "product": "Y", "category": "other", "revenue": 5.0},
        {"date": "01-02-2024", "product": "X", "category": "K", "revenue": 1.0},
        {"date": "01-02-2024", "product": "X", "category": "k ", "revenue": 1.0},
    ]
    datasets = build_chart_datasets(rows)

    assert {m.month_name: m.revenue for m in datasets.monthly}["February"] == 1e16
    assert datasets.products[0].revenue == 1e16
    assert datasets.categories[0].revenue == 1e16


def test_build_chart_datasets_cleans_records_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    real_clean = build_charts.clean_sales_frame

    def counting_clean(pdf: pd.DataFrame) -> pd.DataFrame:
        calls.append(len(pdf))
        return real_clean(pdf)

    monkeypatch.setattr(build_charts, "clean_sales_frame", counting_clean)
    build_chart_datasets(EXAMPLE, parallel=True)

    assert calls == [3]


def test_build_chart_datasets_rejects_bad_top_n() -> None:
    with pytest.raises(ValueError):
        build_chart_datasets(EXAMPLE, top_n=0)

"""Display formatting for the chart datasets.

Stateless helpers used by the dashboard for money values, axis ticks and
labels. Nothing here affects the aggregated numbers.
"""

from __future__ import annotations

ELLIPSIS = "…"

# (limit, keep): labels longer than `limit` keep `keep` characters plus an ellipsis
AXIS_LABEL = (14, 12)
LEGEND_LABEL = (14, 12)
PIE_LABEL = (12, 10)

CHART_COLORS = [
    "#0f766e",
    "#0369a1",
    "#7c3aed",
    "#b45309",
    "#be123c",
    "#4f46e5",
    "#059669",
    "#dc2626",
]

NO_PRODUCT_DATA = "No product data to display"
NO_CATEGORY_DATA = "No category data to display"


def format_money(value: float) -> str:
    """Return `value` with thousands separators and exactly two decimals.

    Example: ``format_money(1234.5) == "1,234.50"``.
    """
    return f"{float(value):,.2f}"


def truncate_label(label: str, limit: int = AXIS_LABEL[0], keep: int = AXIS_LABEL[1]) -> str:
    """Shorten `label` to `keep` characters plus an ellipsis when longer than `limit`."""
    if len(label) > limit:
        return f"{label[:keep]}{ELLIPSIS}"
    return label


def truncate_label_expr(limit: int = AXIS_LABEL[0], keep: int = AXIS_LABEL[1]) -> str:
    """Vega expression applying `truncate_label` to an axis or legend label.

    Used as `labelExpr` so the chart stays keyed on the full value and only
    the displayed text is shortened.
    """
    return (
        f"length(datum.label) > {limit}"
        f" ? substring(datum.label, 0, {keep}) + '{ELLIPSIS}'"
        " : datum.label"
    )


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def currency_tick(value: float) -> str:
    """Format an axis tick: `$1.2k` from 1000 upwards, `$950` below."""
    if value >= 1000:
        return f"${value / 1000:.1f}k"
    return f"${_plain_number(value)}"


def color_for(index: int) -> str:
    """Return the palette color for the `index`-th slice, cycling the palette."""
    return CHART_COLORS[index % len(CHART_COLORS)]

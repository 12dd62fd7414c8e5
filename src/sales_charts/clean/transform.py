"""Cleaning and normalization utilities.

This module holds the scalar rules (month extraction from `DD-MM-YYYY` dates,
single-character title casing of categories) and `clean_sales_frame`, which
applies them to the canonical record frame. The output frame has a stable
schema: the record columns plus `month` and `category_title`.
"""
from __future__ import annotations

import logging
import re
from typing import Any

import pandas as pd

log = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Leading integer of a segment: optional whitespace and sign, then ASCII digits.
LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def month_number(date_str: Any) -> int | None:
    """Return the month (1-12) of a `DD-MM-YYYY` date, or ``None``.

    The string must split on `-` into exactly three segments. The middle
    segment is read as a leading integer (`"03"`, `" 3"` and `"3x"` all give
    3) and accepted only within 1..12. Never raises.

    Args:
        date_str: Date value; non-strings are converted with `str`.

    Returns:
        Month number, or ``None`` when the date does not yield a valid month.
    """
    parts = str(date_str).strip().split("-")
    if len(parts) != 3:
        return None
    m = LEADING_INT_RE.match(parts[1])
    if not m:
        return None
    month = int(m.group(1))
    return month if 1 <= month <= 12 else None


def title_case(value: Any) -> str:
    """Uppercase the first character and lowercase the rest, after trimming.

    Only the first character of the whole string is capitalized
    (`"home decor"` -> `"Home decor"`). ``None`` and blank values give `""`.
    """
    s = "" if value is None else str(value).strip()
    if not s:
        return ""
    return s[0].upper() + s[1:].lower()


def clean_sales_frame(pdf: pd.DataFrame) -> pd.DataFrame:
    """Derive the grouping columns used by the chart aggregations.

    Args:
        pdf: Canonical record frame (`date`, `product`, `category`, `revenue`).

    Returns:
        Copy of `pdf` with absent revenue set to 0.0, a nullable `month`
        column (``<NA>`` for unparseable dates) and `category_title`.
    """
    log.debug("Cleaning %d sales rows", len(pdf))
    pdf = pdf.copy()

    # -----------------------------
    # Absent revenue adds nothing
    # -----------------------------
    pdf["revenue"] = pdf["revenue"].astype(float).fillna(0.0)

    # -----------------------------
    # Month bucket
    # -----------------------------
    pdf["month"] = pd.array(
        [month_number(d) for d in pdf["date"]],
        dtype="Int64",
    )

    # -----------------------------
    # Category label
    # -----------------------------
    pdf["category_title"] = [title_case(c) for c in pdf["category"]]

    unparsed = int(pdf["month"].isna().sum())
    if unparsed:
        log.debug("%d rows have no parseable month and are left out of monthly totals", unparsed)

    return pdf

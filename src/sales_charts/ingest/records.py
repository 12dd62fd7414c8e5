"""Conversions between raw rows, `SalesRecord` models and pandas frames."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from sales_charts.models import SalesRecord

log = logging.getLogger(__name__)

RECORD_COLUMNS = ["date", "product", "category", "revenue"]


def coerce_records(rows: Iterable[SalesRecord | Mapping[str, Any]]) -> list[SalesRecord]:
    """Return `rows` as a list of `SalesRecord`, preserving input order.

    The iterable is consumed exactly once, so generators are safe to pass.

    Args:
        rows: `SalesRecord` instances or mappings with record fields.

    Returns:
        List of `SalesRecord` in the same order as `rows`.
    """
    records: list[SalesRecord] = []
    for row in rows:
        if isinstance(row, SalesRecord):
            records.append(row)
        else:
            records.append(SalesRecord.model_validate(dict(row)))
    return records


def records_from_frame(pdf: pd.DataFrame) -> list[SalesRecord]:
    """Convert a pandas DataFrame (e.g. a CSV upload) into `SalesRecord`s.

    Missing columns are treated as absent fields and NaN cells as ``None``.
    Columns other than the record fields are ignored.

    Args:
        pdf: DataFrame with some or all of `date`, `product`, `category`, `revenue`.

    Returns:
        List of `SalesRecord`, one per DataFrame row, in row order.
    """
    cols = [c for c in RECORD_COLUMNS if c in pdf.columns]
    missing = sorted(set(RECORD_COLUMNS) - set(cols))
    if missing:
        log.warning("Sales data is missing columns %s; treating them as empty", missing)

    subset = pdf[cols].astype(object).where(pdf[cols].notna(), None)
    records = coerce_records(subset.to_dict(orient="records"))
    log.info("Loaded %d sales records from frame", len(records))
    return records


def records_to_frame(records: Iterable[SalesRecord]) -> pd.DataFrame:
    """Build the canonical frame with columns `date, product, category, revenue`.

    The columns exist even when `records` is empty. Row order follows input
    order, which fixes group order and summation order downstream.
    """
    rows = [r.model_dump(mode="python") for r in records]
    pdf = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    pdf["revenue"] = pdf["revenue"].astype(float)
    return pdf

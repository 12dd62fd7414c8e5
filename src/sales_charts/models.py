"""Pydantic models for sales records and the chart datasets built from them.

`SalesRecord` is deliberately lenient: a malformed field never rejects the row,
it is coerced to a value that contributes nothing to the aggregations. The
dataset models are strict and describe exactly what the charts consume.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SalesRecord(BaseModel):
    """Schema for one sales transaction as supplied by the caller.

    Attributes:
        date: Transaction date as `DD-MM-YYYY`; only the month is used.
        product: Product identifier; may be empty.
        category: Category identifier; may be empty, grouped case-insensitively.
        revenue: Transaction revenue, or ``None`` when absent or unusable.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)
    date: str = ""
    product: str = ""
    category: str = ""
    revenue: float | None = None

    @field_validator("date", "product", "category", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float) and math.isnan(value):
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("revenue", mode="before")
    @classmethod
    def _number_or_none(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None


class MonthlyRevenue(BaseModel):
    """Revenue summed for one calendar month, across all years."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    month_number: int = Field(..., ge=1, le=12)
    month_name: str
    revenue: float


class ProductRevenue(BaseModel):
    """Revenue summed for one product."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    product: str
    revenue: float


class CategoryRevenue(BaseModel):
    """Revenue summed for one normalized category."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    category: str
    revenue: float

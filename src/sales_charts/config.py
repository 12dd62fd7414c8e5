"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the dashboard's environment variables (including a check that
`SALES_TOP_N` is a positive integer).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_TOP_N = 8
DEFAULT_LOG_PATH = "logs/sales_charts.log"


@dataclass(frozen=True)
class Settings:
    """Container for configuration read from the environment.

    Attributes:
        top_n_products: How many products the top-product chart keeps.
        log_path: File that receives log output alongside stdout.
        sales_data_path: Optional CSV the dashboard loads when nothing is uploaded.
    """
    top_n_products: int
    log_path: Path
    sales_data_path: Path | None


def _parse_top_n(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"SALES_TOP_N must be an integer, got {raw!r}.") from None
    if value < 1:
        raise RuntimeError(f"SALES_TOP_N must be at least 1, got {value}.")
    return value


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `SALES_TOP_N` is not a positive integer.
    """
    top_n = _parse_top_n(os.getenv("SALES_TOP_N", str(DEFAULT_TOP_N)).strip())
    log_path = Path(os.getenv("SALES_LOG_PATH", DEFAULT_LOG_PATH))
    data_path = os.getenv("SALES_DATA_PATH", "").strip()

    return Settings(
        top_n_products=top_n,
        log_path=log_path,
        sales_data_path=Path(data_path) if data_path else None,
    )

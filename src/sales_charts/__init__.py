"""sales_charts package.

Aggregates sales records into the three datasets behind the sales dashboard
charts: a monthly revenue trend, top-product revenue bars, and a category
revenue pie, plus the small formatting helpers the dashboard uses.

Architecture:
- Raw rows → SalesRecord (ingest) → cleaned frame (clean) → chart datasets (aggregate)
- pandas performs the grouping passes; dask can run the three passes in parallel
- Pydantic models describe both the input records and the chart datasets
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

"""Record ingestion helpers.

Turns caller-supplied rows (mappings, models, or pandas DataFrames) into
`SalesRecord` objects and back into the canonical pandas frame used by the
cleaning and aggregation steps.
"""

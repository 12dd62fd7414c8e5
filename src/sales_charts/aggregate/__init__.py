"""Chart dataset aggregation.

This package turns sales records into the three datasets the dashboard
renders (monthly revenue, top products, revenue by category). Each dataset is
a pure function of the input records and is recomputed on every call.
"""

"""Cleaning utilities for sales records.

Provides the month extraction and category normalization rules, and the frame
transform that derives the grouping columns used by the aggregations.
"""

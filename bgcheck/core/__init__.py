"""Lookup pipeline: fetching, pagination, normalization, scoring."""

"""
Price history ingestion and normalization module.

Handles provider payload parsing, series validation, and filtering of
per-instrument histories into the inputs used by the analytics stages.
"""

"""Numeric building blocks: return correlation and performance aggregation"""

from .correlation import build_correlation_matrix, pearson_correlation
from .performance import (
    aggregate_asset_class,
    calculate_performance,
    classify_strength,
    classify_trend,
)

__all__ = [
    "pearson_correlation",
    "build_correlation_matrix",
    "calculate_performance",
    "aggregate_asset_class",
    "classify_trend",
    "classify_strength",
]

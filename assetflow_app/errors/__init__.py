"""
Error classification system for the correlation and flow engine.

This module provides the structured exception hierarchy for the kinds of
problems met while fetching, validating and analyzing price history.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
)
from .system_failures import (
    SystemFailureError,
    MarketDataFetchError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # System Failures
    "SystemFailureError",
    "MarketDataFetchError",
    "ConfigurationError",
]

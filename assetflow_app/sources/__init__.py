"""
Market data sources.

Each source fetches daily closes per symbol; ``fetch_universe`` runs the
fetches concurrently and joins them before any computation starts.
"""

from .base import (
    FetchError,
    FetchPermanentError,
    FetchRetryableError,
    MarketDataSource,
)
from .http import HttpHistorySource
from .proxy import ProxiedHistorySource
from .static import StaticHistorySource
from .yahoo import YahooChartSource

__all__ = [
    "FetchError",
    "FetchPermanentError",
    "FetchRetryableError",
    "MarketDataSource",
    "HttpHistorySource",
    "ProxiedHistorySource",
    "StaticHistorySource",
    "YahooChartSource",
]

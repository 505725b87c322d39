"""
System failure error classifications.

These exceptions represent failures outside a single computation's inputs:
an upstream provider that cannot be reached, or configuration that cannot
be used.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class MarketDataFetchError(SystemFailureError):
    """Upstream market data request failed for a symbol."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.status_code = status_code


class ConfigurationError(SystemFailureError):
    """Configuration overrides failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []

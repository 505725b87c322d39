"""
Validation for normalized price series.

Series handed to the analytics stages must be ascending by date with no
duplicates, and every close must be a finite, non-negative number. Gaps in
the calendar are allowed.
"""

import math
from typing import Any, Optional

from ..errors import MalformedDataError, MissingDataError, TemporalDataError
from .models import PricePoint


class SeriesValidator:
    """Validates price series against ordering and value rules."""

    def __init__(self, config: Optional[dict[str, Any]] = None):
        """
        Initialize validator with configuration.

        Args:
            config: Validation configuration dict
        """
        self.config = config or {}

        # Zero closes are tolerated; return derivation skips them
        self.allow_zero_close = self.config.get("allow_zero_close", True)

    def validate(self, symbol: str, points: Optional[list[PricePoint]]) -> None:
        """
        Validate one instrument's series.

        Args:
            symbol: Instrument symbol, used for error context
            points: Series to validate

        Raises:
            MissingDataError: If the series is None or empty
            TemporalDataError: If dates repeat or go backwards
            MalformedDataError: If a close is not a usable number
        """
        if not points:
            raise MissingDataError(
                f"No price history for {symbol}",
                data_type="price_history",
                context={"symbol": symbol}
            )

        self._validate_closes(symbol, points)
        self._validate_ordering(symbol, points)

    def _validate_closes(self, symbol: str, points: list[PricePoint]) -> None:
        for point in points:
            close = point.close
            if isinstance(close, bool) or not isinstance(close, (int, float)) or not math.isfinite(close):
                raise MalformedDataError(
                    f"Non-finite close for {symbol} on {point.date}",
                    raw_data=repr(close),
                    expected_format="finite float",
                    context={"symbol": symbol}
                )
            if close < 0 or (close == 0 and not self.allow_zero_close):
                raise MalformedDataError(
                    f"Invalid close {close} for {symbol} on {point.date}",
                    raw_data=repr(close),
                    expected_format="positive float",
                    context={"symbol": symbol}
                )

    def _validate_ordering(self, symbol: str, points: list[PricePoint]) -> None:
        for previous, current in zip(points, points[1:]):
            if current.date == previous.date:
                raise TemporalDataError(
                    f"Duplicate date {current.date} in {symbol} history",
                    date=current.date.isoformat(),
                    previous_date=previous.date.isoformat(),
                    context={"symbol": symbol}
                )
            if current.date < previous.date:
                raise TemporalDataError(
                    f"Out-of-order date {current.date} after {previous.date} in {symbol} history",
                    date=current.date.isoformat(),
                    previous_date=previous.date.isoformat(),
                    context={"symbol": symbol}
                )


def is_ascending_unique(points: list[PricePoint]) -> bool:
    """Check that dates strictly increase."""
    return all(a.date < b.date for a, b in zip(points, points[1:]))


def sort_and_dedupe(points: list[PricePoint]) -> list[PricePoint]:
    """
    Sort points by date, keeping the last point seen for any repeated date.

    Args:
        points: Possibly unordered points from a provider payload

    Returns:
        Ascending series with unique dates
    """
    by_date: dict = {}
    for point in points:
        by_date[point.date] = point
    return [by_date[d] for d in sorted(by_date)]

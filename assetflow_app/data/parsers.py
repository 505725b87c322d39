"""
Provider-specific parsers for converting raw history payloads to price points.

Handles the chart endpoint's columnar format (parallel timestamp and close
arrays) and the row format served by the internal historical-data endpoint
and by static JSON files.
"""

import logging
import math
from typing import Any, Union

import orjson

from ..utils.time import epoch_to_date, parse_iso_date
from .models import PricePoint
from .validators import is_ascending_unique, sort_and_dedupe

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when parsing fails due to invalid data format."""
    pass


class EmptyPayloadError(ParseError):
    """Raised when the provider answered but returned no usable series."""
    pass


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse a raw JSON response body.

    Args:
        raw_data: Response body as text or bytes

    Returns:
        Decoded JSON value

    Raises:
        ParseError: If the body is not valid JSON
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON payload: {e}") from e


def _coerce_close(value: Any) -> Union[float, None]:
    """Convert a raw close to float, None when absent or unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        close = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(close):
        return None
    return close


def _finalize(points: list[PricePoint], symbol: str) -> list[PricePoint]:
    if not is_ascending_unique(points):
        logger.debug("Reordering history for %s (%d points)", symbol, len(points))
        points = sort_and_dedupe(points)
    return points


def parse_chart_payload(payload: dict[str, Any], symbol: str) -> list[PricePoint]:
    """
    Parse a chart endpoint response into an ascending price series.

    Expected shape::

        {"chart": {"result": [{"timestamp": [...],
                               "indicators": {"quote": [{"close": [...]}]}}]}}

    Null closes are skipped.

    Args:
        payload: Decoded response body
        symbol: Internal symbol for error context

    Returns:
        Ascending list of price points

    Raises:
        EmptyPayloadError: If the response carries no result
        ParseError: If the timestamp and close arrays are inconsistent
    """
    if not isinstance(payload, dict):
        raise ParseError(f"Chart payload for {symbol} must be an object, got {type(payload).__name__}")

    chart = payload.get("chart") or {}
    results = chart.get("result") or []
    if not results:
        error = chart.get("error")
        raise EmptyPayloadError(f"No chart data returned for {symbol}: {error}")

    result = results[0] or {}
    timestamps = result.get("timestamp")
    try:
        closes = result["indicators"]["quote"][0]["close"]
    except (KeyError, IndexError, TypeError):
        closes = None

    if not timestamps or not closes:
        raise EmptyPayloadError(f"Chart data for {symbol} has no timestamps or closes")

    if len(timestamps) != len(closes):
        raise ParseError(
            f"Invalid data structure for {symbol}: {len(timestamps)} timestamps vs {len(closes)} closes"
        )

    points = []
    for ts, raw_close in zip(timestamps, closes):
        close = _coerce_close(raw_close)
        if close is None or ts is None:
            continue
        points.append(PricePoint(date=epoch_to_date(ts), close=close))

    return _finalize(points, symbol)


def parse_history_rows(rows: Any, symbol: str) -> list[PricePoint]:
    """
    Parse ``[{"date": "YYYY-MM-DD", "close": float}, ...]`` rows.

    Rows with a missing or null close are skipped.

    Args:
        rows: List of row objects
        symbol: Internal symbol for error context

    Returns:
        Ascending list of price points

    Raises:
        ParseError: If rows are not a list or a date cannot be parsed
    """
    if not isinstance(rows, list):
        raise ParseError(f"History rows for {symbol} must be a list, got {type(rows).__name__}")

    points = []
    for row in rows:
        if not isinstance(row, dict):
            raise ParseError(f"History row for {symbol} must be an object: {row!r}")
        close = _coerce_close(row.get("close"))
        if close is None:
            continue
        raw_date = row.get("date")
        if not isinstance(raw_date, str):
            raise ParseError(f"History row for {symbol} has no date: {row!r}")
        try:
            day = parse_iso_date(raw_date)
        except ValueError as e:
            raise ParseError(f"Invalid date {raw_date!r} in {symbol} history") from e
        points.append(PricePoint(date=day, close=close))

    return _finalize(points, symbol)


def parse_history_payload(payload: Any, symbol: str) -> list[PricePoint]:
    """
    Parse the internal historical-data endpoint response.

    Expected shape: ``{"symbol": ..., "data": [{"date": ..., "close": ...}]}``.
    A payload carrying an ``error`` key is treated as empty.

    Raises:
        EmptyPayloadError: If the endpoint reported an error or no data array
        ParseError: If the rows are malformed
    """
    if not isinstance(payload, dict):
        raise ParseError(f"History payload for {symbol} must be an object, got {type(payload).__name__}")

    if payload.get("error"):
        raise EmptyPayloadError(f"History endpoint error for {symbol}: {payload['error']}")

    rows = payload.get("data")
    if not isinstance(rows, list):
        raise EmptyPayloadError(f"Invalid data structure for {symbol}: no data array found")

    return parse_history_rows(rows, symbol)

"""
Time utilities for report timestamps and lookback windows.

Report timestamps are UTC wall-clock time at the moment of calculation.
Price history dates are calendar days derived from provider epoch seconds
in UTC.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

# Calendar-day thresholds for period labels, smallest first
_PERIOD_LABELS = (
    (1, "1d"),
    (5, "5d"),
    (30, "1mo"),
    (90, "3mo"),
    (180, "6mo"),
    (365, "1y"),
)


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_calculated_at(ts: Optional[datetime] = None) -> str:
    """
    Format a report timestamp as ISO8601 with millisecond precision and a Z suffix.

    Args:
        ts: Timestamp to format, defaults to now

    Returns:
        e.g. "2024-03-01T14:30:00.123Z"
    """
    if ts is None:
        ts = utc_now()
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def epoch_to_date(epoch_seconds: float) -> date:
    """Convert provider epoch seconds to a UTC calendar day."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date()


def parse_iso_date(value: str) -> date:
    """
    Parse an ISO calendar day, tolerating a trailing time component.

    Args:
        value: "YYYY-MM-DD" or a full ISO timestamp

    Returns:
        The calendar day

    Raises:
        ValueError: If the value is not an ISO date
    """
    return date.fromisoformat(value[:10])


def lookback_window(lookback_days: int, end: Optional[datetime] = None) -> tuple[int, int]:
    """
    Compute the epoch-second window for a lookback request.

    Args:
        lookback_days: Number of calendar days to look back
        end: Window end, defaults to now

    Returns:
        Tuple of (period_start, period_end) epoch seconds
    """
    if end is None:
        end = utc_now()
    period_end = int(end.timestamp())
    period_start = int((end - timedelta(days=lookback_days)).timestamp())
    return period_start, period_end


def period_label(lookback_days: int) -> str:
    """Map a lookback in calendar days to the nearest covering period label."""
    for days, label in _PERIOD_LABELS:
        if lookback_days <= days:
            return label
    return _PERIOD_LABELS[-1][1]

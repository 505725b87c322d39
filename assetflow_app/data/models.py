"""
Canonical data models for normalized price history.

This module defines immutable data structures that represent clean, validated
daily closes after parsing from raw provider formats.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PricePoint:
    """Single daily close for an instrument."""
    date: date       # UTC calendar day
    close: float     # Closing price


# symbol -> ascending price history; None marks a failed upstream fetch
InstrumentSeries = dict[str, Optional[list[PricePoint]]]


@dataclass(frozen=True)
class DroppedInstrument:
    """An instrument excluded from a computation and why."""
    symbol: str
    reason: str
    available_count: int = 0


@dataclass(frozen=True)
class SeriesNormalization:
    """Result of filtering a batch of instrument histories."""

    # Surviving series, in universe order
    valid: dict[str, list[PricePoint]] = field(default_factory=dict)

    # Instruments that did not make the cut
    dropped: tuple[DroppedInstrument, ...] = ()

    # Size of the requested universe
    total_count: int = 0

    @property
    def valid_count(self) -> int:
        return len(self.valid)

    @property
    def symbols(self) -> list[str]:
        return list(self.valid)

    def is_sufficient(self, required: int = 2) -> bool:
        """Whether enough instruments survived for a cross-instrument computation."""
        return self.valid_count >= required

    @classmethod
    def empty(cls, total_count: int = 0) -> "SeriesNormalization":
        """Create a result with no surviving instruments."""
        return cls(total_count=total_count)

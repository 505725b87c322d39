"""
Series normalization for the correlation and performance stages.

The SeriesNormalizer filters a batch of fetched instrument histories down to
the instruments that can take part in a computation. Instruments with missing,
malformed or too-short history are dropped and reported, never raised.
"""

from typing import Iterable, Optional

import structlog

from ..config.defaults import CorrelationParams
from ..errors import DataQualityError
from .models import DroppedInstrument, InstrumentSeries, PricePoint, SeriesNormalization
from .validators import SeriesValidator

logger = structlog.get_logger(__name__)


def compute_returns(points: list[PricePoint]) -> list[float]:
    """
    Derive single-period returns from a price series.

    Element i is (close[i+1] - close[i]) / close[i]. Periods whose base close
    is not positive are skipped, so the result may be shorter than len - 1.

    Args:
        points: Ascending price series

    Returns:
        List of returns, empty when fewer than two points
    """
    if len(points) < 2:
        return []

    returns = []
    for previous, current in zip(points, points[1:]):
        if previous.close > 0:
            returns.append((current.close - previous.close) / previous.close)
    return returns


class SeriesNormalizer:
    """
    Filters instrument histories by validity and minimum length.

    Correlation use requires a minimum number of observations per instrument.
    Performance use accepts any non-empty series.
    """

    def __init__(self, params: Optional[CorrelationParams] = None,
                 validator: Optional[SeriesValidator] = None):
        self.params = params or CorrelationParams()
        self.validator = validator or SeriesValidator()

    def normalize(
        self,
        histories: InstrumentSeries,
        min_length: int = 1,
        universe: Optional[Iterable[str]] = None
    ) -> SeriesNormalization:
        """
        Keep instruments whose validated series has at least ``min_length`` points.

        Args:
            histories: symbol -> series (None or empty for failed fetches)
            min_length: Minimum number of points to keep an instrument
            universe: Requested symbols, in output order; defaults to the
                keys of ``histories``

        Returns:
            SeriesNormalization with surviving series and drop reasons
        """
        symbols = list(universe) if universe is not None else list(histories)

        valid: dict[str, list[PricePoint]] = {}
        dropped: list[DroppedInstrument] = []

        for symbol in symbols:
            points = histories.get(symbol)

            try:
                self.validator.validate(symbol, points)
            except DataQualityError as e:
                count = len(points) if points else 0
                dropped.append(DroppedInstrument(symbol=symbol, reason=str(e), available_count=count))
                logger.warning(
                    "Dropping instrument with unusable history",
                    symbol=symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                    available_count=count
                )
                continue

            if len(points) < min_length:
                dropped.append(DroppedInstrument(
                    symbol=symbol,
                    reason=f"{len(points)} points, {min_length} required",
                    available_count=len(points)
                ))
                logger.info(
                    "Dropping instrument with insufficient history",
                    symbol=symbol,
                    available_count=len(points),
                    required_count=min_length
                )
                continue

            valid[symbol] = points

        result = SeriesNormalization(valid=valid, dropped=tuple(dropped), total_count=len(symbols))

        logger.debug(
            "Normalized instrument histories",
            valid_count=result.valid_count,
            total_count=result.total_count,
            min_length=min_length
        )

        return result

    def normalize_for_correlation(
        self,
        histories: InstrumentSeries,
        universe: Optional[Iterable[str]] = None
    ) -> SeriesNormalization:
        """Keep instruments with at least ``min_observations`` points."""
        return self.normalize(histories, min_length=self.params.min_observations, universe=universe)

    def normalize_for_performance(
        self,
        histories: InstrumentSeries,
        universe: Optional[Iterable[str]] = None
    ) -> SeriesNormalization:
        """Keep every instrument with a non-empty, valid series."""
        return self.normalize(histories, min_length=1, universe=universe)

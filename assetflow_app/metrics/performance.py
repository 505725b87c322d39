"""Multi-horizon instrument performance and asset class aggregation"""

import math
from dataclasses import dataclass
from typing import Optional

import structlog

from ..config.universe import AssetClass
from ..data.models import PricePoint
from ..models.analysis import AssetClassPerformance, Strength, Trend

logger = structlog.get_logger(__name__)

# Lookback in observations for each horizon
WEEK_LOOKBACK = 7
MONTH_LOOKBACK = 21

# Weighted score favours the most recent horizon
WEIGHT_1D = 0.5
WEIGHT_1W = 0.3
WEIGHT_1M = 0.2

TREND_THRESHOLD = 0.005
STRONG_THRESHOLD = 0.02
MODERATE_THRESHOLD = 0.01


@dataclass(frozen=True)
class InstrumentPerformance:
    """Relative change of one instrument over the three horizons."""
    symbol: str
    perf_1d: float
    perf_1w: float
    perf_1m: float

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.perf_1d, self.perf_1w, self.perf_1m))


def _relative_change(latest: float, anchor: float) -> float:
    if anchor == 0:
        return math.nan
    return (latest - anchor) / anchor


def calculate_performance(prices: list[PricePoint]) -> tuple[float, float, float]:
    """
    Calculate 1-day, 1-week and 1-month relative change anchored on the latest point

    The week and month anchors fall back to the oldest available point when
    the series is shorter than the horizon.

    Args:
        prices: Ascending price series

    Returns:
        Tuple of (perf_1d, perf_1w, perf_1m); all 0.0 with fewer than two
        points. A zero anchor price yields NaN for that horizon.
    """
    if len(prices) < 2:
        return 0.0, 0.0, 0.0

    latest = prices[-1].close

    prev_1d = prices[-2].close
    prev_1w = prices[-1 - min(WEEK_LOOKBACK, len(prices) - 1)].close
    prev_1m = prices[-1 - min(MONTH_LOOKBACK, len(prices) - 1)].close

    return (
        _relative_change(latest, prev_1d),
        _relative_change(latest, prev_1w),
        _relative_change(latest, prev_1m),
    )


def classify_trend(weighted_score: float) -> Trend:
    """Bullish above +0.5%, bearish below -0.5%, otherwise neutral"""
    if weighted_score > TREND_THRESHOLD:
        return Trend.BULLISH
    if weighted_score < -TREND_THRESHOLD:
        return Trend.BEARISH
    return Trend.NEUTRAL


def classify_strength(weighted_score: float) -> Strength:
    """Strong above 2% absolute, moderate above 1%, otherwise weak"""
    magnitude = abs(weighted_score)
    if magnitude > STRONG_THRESHOLD:
        return Strength.STRONG
    if magnitude > MODERATE_THRESHOLD:
        return Strength.MODERATE
    return Strength.WEAK


def weighted_score(perf_1d: float, perf_1w: float, perf_1m: float) -> float:
    """Combine horizon figures with fixed 0.5 / 0.3 / 0.2 weights"""
    return perf_1d * WEIGHT_1D + perf_1w * WEIGHT_1W + perf_1m * WEIGHT_1M


def aggregate_asset_class(
    asset_class: AssetClass,
    histories: dict[str, list[PricePoint]],
) -> AssetClassPerformance:
    """
    Combine member instrument performance into one record for the class

    Members missing from ``histories`` do not contribute. Members whose
    figures are non-finite are discarded. With no surviving member the
    record is zeroed, neutral and weak.

    Args:
        asset_class: Class definition with its member symbols
        histories: Normalized symbol -> series for the batch

    Returns:
        AssetClassPerformance for the class
    """
    contributions: list[InstrumentPerformance] = []

    for symbol in asset_class.members:
        prices: Optional[list[PricePoint]] = histories.get(symbol)
        if not prices:
            continue

        perf = InstrumentPerformance(symbol, *calculate_performance(prices))
        if not perf.is_finite:
            logger.warning(
                "Discarding non-finite instrument performance",
                asset_class=asset_class.key,
                symbol=symbol,
                perf_1d=perf.perf_1d,
                perf_1w=perf.perf_1w,
                perf_1m=perf.perf_1m
            )
            continue
        contributions.append(perf)

    if not contributions:
        logger.warning(
            "No usable instruments for asset class, emitting zeroed record",
            asset_class=asset_class.key,
            members=list(asset_class.members)
        )
        return AssetClassPerformance.zeroed(asset_class.key, asset_class.display_name, asset_class.members)

    count = len(contributions)
    avg_1d = sum(p.perf_1d for p in contributions) / count
    avg_1w = sum(p.perf_1w for p in contributions) / count
    avg_1m = sum(p.perf_1m for p in contributions) / count
    score = weighted_score(avg_1d, avg_1w, avg_1m)

    logger.debug(
        "Asset class performance",
        asset_class=asset_class.key,
        perf_1d=round(avg_1d, 6),
        perf_1w=round(avg_1w, 6),
        perf_1m=round(avg_1m, 6),
        weighted_score=round(score, 6),
        valid_contracts=count
    )

    return AssetClassPerformance(
        class_key=asset_class.key,
        name=asset_class.display_name,
        perf_1d=avg_1d,
        perf_1w=avg_1w,
        perf_1m=avg_1m,
        weighted_score=score,
        trend=classify_trend(score),
        strength=classify_strength(score),
        contracts=asset_class.members,
        valid_contracts=count,
    )

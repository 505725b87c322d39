"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

import pytest

from assetflow_app.config.universe import ASSET_CLASSES, ASSET_CLASSES_BY_KEY
from assetflow_app.data.models import PricePoint
from assetflow_app.metrics.performance import classify_strength, classify_trend
from assetflow_app.models.analysis import AssetClassPerformance

SERIES_START = date(2024, 1, 2)


def _series(closes: list[float], start: date = SERIES_START) -> list[PricePoint]:
    return [PricePoint(date=start + timedelta(days=i), close=float(c)) for i, c in enumerate(closes)]


def _geometric(start: float, rate: float, count: int) -> list[float]:
    return [start * (1 + rate) ** i for i in range(count)]


@pytest.fixture
def series_factory() -> Callable[..., list[PricePoint]]:
    """Build a daily price series from closes, one calendar day apart."""
    return _series


@pytest.fixture
def performance_factory() -> Callable[[str, float], AssetClassPerformance]:
    """Build an asset class performance record with a given weighted score."""
    def make(key: str, score: float) -> AssetClassPerformance:
        asset_class = ASSET_CLASSES_BY_KEY[key]
        return AssetClassPerformance(
            class_key=key,
            name=asset_class.display_name,
            perf_1d=score,
            perf_1w=score,
            perf_1m=score,
            weighted_score=score,
            trend=classify_trend(score),
            strength=classify_strength(score),
            contracts=asset_class.members,
            valid_contracts=len(asset_class.members),
        )
    return make


@pytest.fixture
def four_score_performances(performance_factory) -> dict[str, AssetClassPerformance]:
    """Stocks -1%, bonds +2%, commodities flat, currencies -0.5%, in configuration order."""
    scores = {"stocks": -0.01, "bonds": 0.02, "commodities": 0.0, "currencies": -0.005}
    return {key: performance_factory(key, scores[key]) for key in scores}


@pytest.fixture
def risk_off_histories() -> dict[str, list[PricePoint]]:
    """
    22 daily closes per instrument: equities fall 1% a day, the bond future
    rises 1% a day, everything else is flat.
    """
    histories = {}
    for asset_class in ASSET_CLASSES:
        if asset_class.key == "stocks":
            closes = _geometric(100.0, -0.01, 22)
        elif asset_class.key == "bonds":
            closes = _geometric(100.0, 0.01, 22)
        else:
            closes = [100.0] * 22
        for symbol in asset_class.members:
            histories[symbol] = _series(closes)
    return histories


@pytest.fixture
def correlated_histories() -> dict[str, list[PricePoint]]:
    """
    40 daily closes for three instruments: /NQ moves with /ES, /ZB moves
    against it.
    """
    moves = [0.01 if i % 3 else -0.015 for i in range(39)]
    es, nq, zb = [100.0], [200.0], [120.0]
    for move in moves:
        es.append(es[-1] * (1 + move))
        nq.append(nq[-1] * (1 + 2 * move))
        zb.append(zb[-1] * (1 - move))
    return {"/ES": _series(es), "/NQ": _series(nq), "/ZB": _series(zb)}


@pytest.fixture
def snapshot_document(risk_off_histories) -> dict[str, Any]:
    """risk_off_histories in the JSON snapshot row format."""
    return {
        symbol: [{"date": p.date.isoformat(), "close": p.close} for p in points]
        for symbol, points in risk_off_histories.items()
    }

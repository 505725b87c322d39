"""Tests for multi-horizon performance and asset class aggregation."""

import math

import pytest

from assetflow_app.config.universe import get_asset_class
from assetflow_app.metrics.performance import (
    aggregate_asset_class,
    calculate_performance,
    classify_strength,
    classify_trend,
    weighted_score,
)
from assetflow_app.models.analysis import Strength, Trend


class TestCalculatePerformance:
    """Test horizon anchoring."""

    def test_full_month_of_history(self, series_factory):
        prices = series_factory([100 + i for i in range(22)])

        perf_1d, perf_1w, perf_1m = calculate_performance(prices)

        assert perf_1d == pytest.approx(1 / 120)
        assert perf_1w == pytest.approx(7 / 114)
        assert perf_1m == pytest.approx(0.21)

    def test_short_series_anchors_on_oldest(self, series_factory):
        perf_1d, perf_1w, perf_1m = calculate_performance(series_factory([100, 110, 121]))

        assert perf_1d == pytest.approx(0.1)
        assert perf_1w == pytest.approx(0.21)
        assert perf_1m == pytest.approx(0.21)

    def test_two_points_share_one_anchor(self, series_factory):
        """With two closes every horizon falls back to the first one."""
        perf_1d, perf_1w, perf_1m = calculate_performance(series_factory([100, 110]))

        assert perf_1d == pytest.approx(0.10)
        assert perf_1d == perf_1w == perf_1m

    def test_single_point_is_zero(self, series_factory):
        assert calculate_performance(series_factory([100])) == (0.0, 0.0, 0.0)

    def test_zero_anchor_is_nan(self, series_factory):
        perf_1d, _, _ = calculate_performance(series_factory([5, 0, 3]))

        assert math.isnan(perf_1d)


class TestClassification:
    """Test trend and strength buckets."""

    @pytest.mark.parametrize("score,expected", [
        (0.006, Trend.BULLISH),
        (-0.006, Trend.BEARISH),
        (0.005, Trend.NEUTRAL),
        (-0.005, Trend.NEUTRAL),
        (0.0, Trend.NEUTRAL),
    ])
    def test_trend(self, score, expected):
        assert classify_trend(score) == expected

    @pytest.mark.parametrize("score,expected", [
        (0.021, Strength.STRONG),
        (-0.03, Strength.STRONG),
        (0.02, Strength.MODERATE),
        (-0.015, Strength.MODERATE),
        (0.01, Strength.WEAK),
        (0.0, Strength.WEAK),
    ])
    def test_strength(self, score, expected):
        assert classify_strength(score) == expected

    def test_weighted_score(self):
        assert weighted_score(0.01, 0.02, 0.03) == pytest.approx(0.005 + 0.006 + 0.006)


class TestAggregateAssetClass:
    """Test per-class averaging."""

    def test_averages_members(self, series_factory):
        histories = {
            "/ES": series_factory([100, 110, 121]),
            "/NQ": series_factory([100, 100, 100]),
        }

        perf = aggregate_asset_class(get_asset_class("stocks"), histories)

        assert perf.perf_1d == pytest.approx(0.05)
        assert perf.perf_1w == pytest.approx(0.105)
        assert perf.weighted_score == pytest.approx(0.5 * 0.05 + 0.3 * 0.105 + 0.2 * 0.105)
        assert perf.valid_contracts == 2
        assert perf.trend == Trend.BULLISH
        assert perf.strength == Strength.STRONG

    def test_missing_members_do_not_contribute(self, series_factory):
        histories = {"/ES": series_factory([100, 110, 121])}

        perf = aggregate_asset_class(get_asset_class("stocks"), histories)

        assert perf.perf_1d == pytest.approx(0.1)
        assert perf.valid_contracts == 1
        assert perf.contracts == ("/ES", "/NQ")

    def test_non_finite_members_are_discarded(self, series_factory):
        histories = {
            "/ES": series_factory([100, 110, 121]),
            "/NQ": series_factory([5, 0, 3]),
        }

        perf = aggregate_asset_class(get_asset_class("stocks"), histories)

        assert perf.valid_contracts == 1
        assert perf.perf_1d == pytest.approx(0.1)

    def test_no_usable_members_is_zeroed(self):
        perf = aggregate_asset_class(get_asset_class("bonds"), {})

        assert perf.weighted_score == 0.0
        assert perf.trend == Trend.NEUTRAL
        assert perf.strength == Strength.WEAK
        assert perf.is_degenerate
        assert perf.name == "Fixed Income"

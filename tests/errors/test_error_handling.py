"""
Error handling tests for the correlation and flow engine.

Tests cover the error classification hierarchy and the recovery policy:
unusable instruments are dropped, too few instruments produce a structured
result, and numeric degeneracy collapses to neutral values.
"""

import math

import pytest

from assetflow_app.data.normalizer import SeriesNormalizer
from assetflow_app.engine import analyze_asset_flows, analyze_correlations
from assetflow_app.errors import (
    ConfigurationError,
    DataQualityError,
    InsufficientDataError,
    MalformedDataError,
    MarketDataFetchError,
    MissingDataError,
    SystemFailureError,
    TemporalDataError,
)
from assetflow_app.metrics.correlation import pearson_correlation
from assetflow_app.models.analysis import InsufficientDataResult


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self):
        """Test that data quality errors are recoverable and carry context."""
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        temporal_error = TemporalDataError("duplicate date", date="2024-01-02", previous_date="2024-01-02")
        assert isinstance(temporal_error, DataQualityError)
        assert temporal_error.previous_date == "2024-01-02"

        missing_error = MissingDataError("missing data", data_type="price_history")
        assert missing_error.data_type == "price_history"

        malformed_error = MalformedDataError("bad close", raw_data="nan", expected_format="finite float")
        assert malformed_error.expected_format == "finite float"

        insufficient_error = InsufficientDataError("too few", required_count=2, available_count=1,
                                                   context={"total_count": 14})
        assert insufficient_error.required_count == 2
        assert insufficient_error.context["total_count"] == 14

    def test_system_failure_error_hierarchy(self):
        """Test that system failures are not recoverable."""
        fetch_error = MarketDataFetchError("HTTP 503", symbol="/ES", status_code=503)
        assert isinstance(fetch_error, SystemFailureError)
        assert fetch_error.recoverable is False
        assert fetch_error.status_code == 503

        config_error = ConfigurationError("bad config", errors=["max_workers"])
        assert config_error.errors == ["max_workers"]
        assert ConfigurationError("bad config").errors == []


class TestRecoveryPolicy:
    """Test how each failure class is handled."""

    def test_unusable_instruments_are_dropped_with_reason(self, series_factory):
        histories = {
            "/ES": series_factory([100.0] * 31),
            "/NQ": None,
            "/GC": series_factory([100.0, float("inf")] + [100.0] * 29),
        }

        result = SeriesNormalizer().normalize_for_correlation(histories)

        assert result.symbols == ["/ES"]
        reasons = {d.symbol: d.reason for d in result.dropped}
        assert reasons["/NQ"] == "No price history for /NQ"
        assert "Non-finite close" in reasons["/GC"]

    def test_no_data_at_all_is_structured_result(self):
        assert isinstance(analyze_correlations({}), InsufficientDataResult)
        assert isinstance(analyze_asset_flows({}), InsufficientDataResult)

    def test_degenerate_correlation_is_zero(self):
        r = pearson_correlation([0.0] * 30, [0.01 * i for i in range(30)])

        assert r == 0.0
        assert not math.isnan(r)

    def test_constant_series_give_zero_off_diagonal(self, series_factory):
        histories = {
            "/ES": series_factory([100.0] * 35),
            "/ZB": series_factory([100.0 + i for i in range(35)]),
        }

        report = analyze_correlations(histories, universe=["/ES", "/ZB"])

        assert report.matrix.get("/ES", "/ZB") == 0.0
        assert report.matrix.get("/ES", "/ES") == 1.0

    def test_insufficient_data_error_not_raised(self, series_factory):
        try:
            analyze_correlations({"/ES": series_factory([1.0] * 40)}, universe=["/ES"])
        except InsufficientDataError:
            pytest.fail("insufficient data must be reported, not raised")

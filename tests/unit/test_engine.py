"""Unit tests for the analysis engine."""

from datetime import UTC, datetime

import pytest

from assetflow_app.config.defaults import CorrelationParams, DefaultConfig, FetchParams, get_default_config
from assetflow_app.config.loader import ConfigLoader
from assetflow_app.engine import FlowAnalysisEngine, analyze_asset_flows, analyze_correlations
from assetflow_app.errors import ConfigurationError
from assetflow_app.models.analysis import (
    AssetFlowReport,
    CorrelationReport,
    InsufficientDataResult,
    RegimeLabel,
)
from assetflow_app.sources import StaticHistorySource

NOW = datetime(2024, 3, 1, 14, 30, 0, 123000, tzinfo=UTC)


class TestAnalyzeCorrelations:
    """Test the pure correlation analysis."""

    def test_builds_report(self, correlated_histories):
        report = analyze_correlations(correlated_histories, universe=["/ES", "/NQ", "/ZB", "/GC"], now=NOW)

        assert isinstance(report, CorrelationReport)
        assert report.valid_contracts == 3
        assert report.total_contracts == 4
        assert report.period == "3mo"
        assert report.data_points == 39
        assert report.calculated_at == "2024-03-01T14:30:00.123Z"
        assert report.matrix.get("/ES", "/NQ") == 1.0
        assert report.matrix.get("/ES", "/ZB") == -1.0
        assert report.matrix.symbols == ["/ES", "/NQ", "/ZB"]

    def test_period_follows_lookback(self, correlated_histories):
        report = analyze_correlations(
            correlated_histories,
            params=CorrelationParams(lookback_days=180),
            universe=["/ES", "/NQ", "/ZB"],
            now=NOW,
        )

        assert report.period == "6mo"
        assert report.matrix.get("/ES", "/ZB") == -1.0

    def test_short_series_excluded(self, correlated_histories, series_factory):
        correlated_histories["/GC"] = series_factory([100.0] * 10)

        report = analyze_correlations(correlated_histories, universe=["/ES", "/NQ", "/ZB", "/GC"], now=NOW)

        assert "/GC" not in report.matrix.symbols

    def test_insufficient_instruments(self, correlated_histories):
        histories = {"/ES": correlated_histories["/ES"], "/NQ": []}

        result = analyze_correlations(histories, universe=["/ES", "/NQ"], now=NOW)

        assert isinstance(result, InsufficientDataResult)
        assert result.status_code == 500
        assert result.to_dict() == {
            "error": "Insufficient data for correlation analysis",
            "validContracts": 1,
            "totalContracts": 2,
            "timestamp": "2024-03-01T14:30:00.123Z",
        }

    def test_defaults_to_full_universe(self, correlated_histories):
        report = analyze_correlations(correlated_histories, now=NOW)

        assert report.total_contracts == 14


class TestAnalyzeAssetFlows:
    """Test the pure asset flow analysis."""

    def test_risk_off_scenario(self, risk_off_histories):
        report = analyze_asset_flows(risk_off_histories, now=NOW)

        assert isinstance(report, AssetFlowReport)
        assert report.regime.label == RegimeLabel.RISK_OFF
        assert report.valid_contracts == 14
        assert report.total_contracts == 14
        assert report.total_flows == 5
        assert report.strong_flows == 5
        assert list(report.asset_classes) == ["stocks", "bonds", "commodities", "currencies"]
        assert report.asset_classes["stocks"].trend.value == "bearish"
        assert report.asset_classes["bonds"].strength.value == "strong"

    def test_flat_markets_are_neutral(self, risk_off_histories, series_factory):
        flat = {symbol: series_factory([50.0] * 22) for symbol in risk_off_histories}

        report = analyze_asset_flows(flat, now=NOW)

        assert report.flows == []
        assert report.regime.label == RegimeLabel.NEUTRAL

    def test_missing_class_is_zeroed(self, risk_off_histories):
        risk_off_histories["/ZB"] = []

        report = analyze_asset_flows(risk_off_histories, now=NOW)

        assert report.asset_classes["bonds"].weighted_score == 0.0
        assert report.asset_classes["bonds"].valid_contracts == 0
        assert report.valid_contracts == 13

    def test_single_instrument_is_insufficient(self, series_factory):
        result = analyze_asset_flows({"/ES": series_factory([1, 2, 3])}, now=NOW)

        assert isinstance(result, InsufficientDataResult)
        assert result.valid_contracts == 1
        assert result.total_contracts == 14
        assert not result.success


class TestFlowAnalysisEngine:
    """Test the fetching engine."""

    def test_asset_flows_from_source(self, risk_off_histories):
        engine = FlowAnalysisEngine(StaticHistorySource(risk_off_histories), clock=lambda: NOW)

        report = engine.asset_flows()

        assert report.regime.label == RegimeLabel.RISK_OFF
        assert report.calculated_at == "2024-03-01T14:30:00.123Z"

    def test_correlations_from_source(self, correlated_histories):
        engine = FlowAnalysisEngine(StaticHistorySource(correlated_histories))

        report = engine.correlations()

        assert report.valid_contracts == 3
        assert report.total_contracts == 14

    def test_narrator_output_attached(self, risk_off_histories):
        engine = FlowAnalysisEngine(
            StaticHistorySource(risk_off_histories),
            narrator=lambda report: f"Regime is {report.regime.label.value}",
        )

        report = engine.asset_flows()

        assert report.narrative == "Regime is risk_off"
        assert report.to_dict()["narrative"] == "Regime is risk_off"

    def test_narrator_failure_keeps_report(self, risk_off_histories):
        def failing_narrator(report):
            raise TimeoutError("model unavailable")

        engine = FlowAnalysisEngine(StaticHistorySource(risk_off_histories), narrator=failing_narrator)

        report = engine.asset_flows()

        assert report.narrative is None
        assert "narrative" not in report.to_dict()

    def test_narrator_skipped_for_insufficient_data(self):
        calls = []
        engine = FlowAnalysisEngine(StaticHistorySource({}), narrator=calls.append)

        result = engine.asset_flows()

        assert isinstance(result, InsufficientDataResult)
        assert calls == []

    def test_invalid_config_rejected(self):
        defaults = get_default_config()
        config = DefaultConfig(
            fetch=FetchParams(max_workers=0),
            correlation=defaults.correlation,
            flows=defaults.flows,
            logging=defaults.logging,
        )

        with pytest.raises(ConfigurationError) as exc_info:
            FlowAnalysisEngine(StaticHistorySource({}), config)

        assert exc_info.value.errors[0].field == "max_workers"

    def test_from_overrides(self, tmp_path, correlated_histories):
        loader = ConfigLoader.create(tmp_path)

        engine = FlowAnalysisEngine.from_overrides(
            StaticHistorySource(correlated_histories),
            {"correlation": {"min_observations": 50}},
            loader=loader,
        )

        assert engine.config.correlation.min_observations == 50
        assert isinstance(engine.correlations(), InsufficientDataResult)

    def test_from_overrides_rejects_invalid(self, tmp_path):
        with pytest.raises(ConfigurationError):
            FlowAnalysisEngine.from_overrides(
                StaticHistorySource({}),
                {"flows": {"lookback_days": -5}},
                loader=ConfigLoader.create(tmp_path),
            )

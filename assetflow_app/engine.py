"""
Orchestration for correlation and asset flow analysis.

The ``analyze_*`` functions are pure: given already-fetched histories they
return a report or an ``InsufficientDataResult``. ``FlowAnalysisEngine`` adds
the fetch step through a market data source, configuration checks and the
optional narrative collaborator.
"""

import dataclasses
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

import structlog

from .config.defaults import CorrelationParams, DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .config.universe import ASSET_CLASSES, UNIVERSE, AssetClass
from .config.validation import ConfigValidator
from .data.models import InstrumentSeries, SeriesNormalization
from .data.normalizer import SeriesNormalizer, compute_returns
from .errors import ConfigurationError, InsufficientDataError
from .flows.inference import infer_flows
from .flows.regime import classify_regime
from .metrics.correlation import build_correlation_matrix, shortest_series_length
from .metrics.performance import aggregate_asset_class
from .models.analysis import AssetFlowReport, CorrelationReport, InsufficientDataResult
from .sources.base import MarketDataSource
from .utils.time import format_calculated_at, period_label, utc_now

logger = structlog.get_logger(__name__)

# Cross-instrument analysis needs at least a pair
MIN_VALID_INSTRUMENTS = 2

Narrator = Callable[[AssetFlowReport], str]


def _require_sufficient(normalization: SeriesNormalization, analysis: str) -> None:
    if not normalization.is_sufficient(MIN_VALID_INSTRUMENTS):
        raise InsufficientDataError(
            f"Insufficient data for {analysis}",
            required_count=MIN_VALID_INSTRUMENTS,
            available_count=normalization.valid_count,
            context={"total_count": normalization.total_count},
        )


def _insufficient(error: InsufficientDataError, normalization: SeriesNormalization,
                  calculated_at: str) -> InsufficientDataResult:
    logger.warning(
        str(error),
        valid_contracts=normalization.valid_count,
        total_contracts=normalization.total_count,
        required_count=error.required_count,
        dropped=[d.symbol for d in normalization.dropped]
    )
    return InsufficientDataResult(
        message=str(error),
        valid_contracts=normalization.valid_count,
        total_contracts=normalization.total_count,
        timestamp=calculated_at,
        required_count=error.required_count or MIN_VALID_INSTRUMENTS,
    )


def analyze_correlations(
    histories: InstrumentSeries,
    params: Optional[CorrelationParams] = None,
    universe: Iterable[str] = UNIVERSE,
    now: Optional[datetime] = None,
) -> Union[CorrelationReport, InsufficientDataResult]:
    """
    Build the correlation report for a batch of fetched histories.

    Args:
        histories: symbol -> series, empty or None for failed fetches
        params: Correlation parameters, defaults when omitted
        universe: Requested symbols in output order
        now: Calculation time, defaults to the current time

    Returns:
        CorrelationReport, or InsufficientDataResult when fewer than two
        instruments have enough observations
    """
    params = params or CorrelationParams()
    calculated_at = format_calculated_at(now)

    normalization = SeriesNormalizer(params).normalize_for_correlation(histories, universe=universe)
    try:
        _require_sufficient(normalization, "correlation analysis")
    except InsufficientDataError as e:
        return _insufficient(e, normalization, calculated_at)

    returns = {symbol: compute_returns(points) for symbol, points in normalization.valid.items()}
    matrix = build_correlation_matrix(returns)
    period = period_label(params.lookback_days)

    logger.info(
        "Correlation matrix built",
        valid_contracts=normalization.valid_count,
        total_contracts=normalization.total_count,
        period=period
    )

    return CorrelationReport(
        matrix=matrix,
        total_contracts=normalization.total_count,
        valid_contracts=normalization.valid_count,
        period=period,
        calculated_at=calculated_at,
        data_points=shortest_series_length(returns),
    )


def analyze_asset_flows(
    histories: InstrumentSeries,
    asset_classes: Iterable[AssetClass] = ASSET_CLASSES,
    now: Optional[datetime] = None,
) -> Union[AssetFlowReport, InsufficientDataResult]:
    """
    Build the asset flow report for a batch of fetched histories.

    Args:
        histories: symbol -> series, empty or None for failed fetches
        asset_classes: Class definitions in configuration order
        now: Calculation time, defaults to the current time

    Returns:
        AssetFlowReport, or InsufficientDataResult when fewer than two
        instruments have any history
    """
    asset_classes = tuple(asset_classes)
    calculated_at = format_calculated_at(now)
    universe = [symbol for asset_class in asset_classes for symbol in asset_class.members]

    normalization = SeriesNormalizer().normalize_for_performance(histories, universe=universe)
    try:
        _require_sufficient(normalization, "asset flow analysis")
    except InsufficientDataError as e:
        return _insufficient(e, normalization, calculated_at)

    performances = {
        asset_class.key: aggregate_asset_class(asset_class, normalization.valid)
        for asset_class in asset_classes
    }
    flows = infer_flows(performances)
    regime = classify_regime(flows)

    report = AssetFlowReport(
        asset_classes=performances,
        flows=flows,
        regime=regime,
        calculated_at=calculated_at,
        valid_contracts=normalization.valid_count,
        total_contracts=normalization.total_count,
    )

    logger.info(
        "Asset flow analysis complete",
        total_flows=report.total_flows,
        strong_flows=report.strong_flows,
        regime=regime.label.value
    )

    return report


class FlowAnalysisEngine:
    """
    Fetches histories through a market data source and runs the analyses.

    Each call fetches fresh data; nothing is cached between calls.
    """

    def __init__(self, source: MarketDataSource, config: Optional[DefaultConfig] = None,
                 narrator: Optional[Narrator] = None, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the engine.

        Args:
            source: Market data collaborator
            config: Tunable parameters, defaults when omitted
            narrator: Optional callable producing commentary for flow reports
            clock: Source of the calculation time

        Raises:
            ConfigurationError: If the configuration fails validation
        """
        self.config = config or get_default_config()
        errors = ConfigValidator.validate_config(dataclasses.asdict(self.config))
        if errors:
            raise ConfigurationError(
                f"Invalid configuration: {len(errors)} error(s)",
                errors=errors
            )

        self.source = source
        self.narrator = narrator
        self.clock = clock

    @classmethod
    def from_overrides(
        cls,
        source: MarketDataSource,
        overrides: Optional[dict] = None,
        source_name: Optional[str] = None,
        loader: Optional[ConfigLoader] = None,
        narrator: Optional[Narrator] = None,
    ) -> "FlowAnalysisEngine":
        """
        Build an engine from layered configuration.

        Precedence is per-call overrides, then the source's section of
        ``sources.yaml``, then defaults.

        Raises:
            ConfigurationError: If the merged configuration fails validation
        """
        loader = loader or ConfigLoader.create()
        config = loader.build_config(source_name or source.name, overrides)
        return cls(source, config, narrator=narrator)

    def correlations(self) -> Union[CorrelationReport, InsufficientDataResult]:
        """Fetch the universe and build the correlation report."""
        params = self.config.correlation
        histories = self.source.fetch_universe(UNIVERSE, params.lookback_days)
        return analyze_correlations(histories, params, universe=UNIVERSE, now=self.clock())

    def asset_flows(self) -> Union[AssetFlowReport, InsufficientDataResult]:
        """Fetch asset class members and build the flow report."""
        symbols = [symbol for asset_class in ASSET_CLASSES for symbol in asset_class.members]
        histories = self.source.fetch_universe(symbols, self.config.flows.lookback_days)

        result = analyze_asset_flows(histories, ASSET_CLASSES, now=self.clock())
        if isinstance(result, AssetFlowReport) and self.narrator is not None:
            result = self._narrate(result)
        return result

    def _narrate(self, report: AssetFlowReport) -> AssetFlowReport:
        try:
            narrative = self.narrator(report)
        except Exception as e:
            logger.error(
                "Narrator failed, returning report without narrative",
                error=str(e),
                error_type=type(e).__name__
            )
            return report

        if not isinstance(narrative, str):
            logger.warning(
                "Narrator returned non-text output, ignoring",
                output_type=type(narrative).__name__
            )
            return report

        return dataclasses.replace(report, narrative=narrative)

"""Output contract validation for serialized correlation and flow reports."""

import math
from typing import Any

import structlog

from ..flows.inference import SIGNIFICANCE_THRESHOLD, STRENGTH_SCALE
from ..models.analysis import STRONG_FLOW_THRESHOLD, RegimeLabel, Strength, Trend

logger = structlog.get_logger(__name__)

_TOLERANCE = 1e-9

FLOW_REPORT_REQUIRED = ("assetClasses", "flows", "marketRegime", "metadata")
FLOW_METADATA_REQUIRED = ("calculatedAt", "totalFlows", "strongFlows")
ASSET_CLASS_REQUIRED = (
    "name", "performance1D", "performance1W", "performance1M",
    "avgPerformance", "trend", "strength",
)
FLOW_EDGE_REQUIRED = ("from", "to", "strength", "direction", "magnitude", "reason")
CORRELATION_REPORT_REQUIRED = ("correlationMatrix", "metadata")
CORRELATION_METADATA_REQUIRED = ("totalContracts", "validContracts", "period", "calculatedAt", "dataPoints")


class ReportValidationError(Exception):
    """Report validation error."""
    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _require(payload: dict[str, Any], fields: tuple[str, ...], where: str) -> None:
    missing = [field for field in fields if field not in payload]
    if missing:
        raise ValueError(f"Missing required fields in {where}: {missing}")


class ReportValidator:
    """Validates serialized reports against the dashboard contract."""

    def __init__(self):
        self.logger = logger

    def validate_flow_report(self, report: dict[str, Any]) -> bool:
        """
        Validate a serialized asset flow report.

        Returns:
            True if valid

        Raises:
            ReportValidationError: If validation fails
        """
        try:
            _require(report, FLOW_REPORT_REQUIRED, "flow report")
            _require(report["metadata"], FLOW_METADATA_REQUIRED, "metadata")

            scores = self._validate_asset_classes(report["assetClasses"])
            self._validate_flows(report["flows"], scores)
            self._validate_regime(report["marketRegime"])
            self._validate_flow_metadata(report["metadata"], report["flows"])

            return True

        except (ValueError, TypeError, KeyError) as e:
            error_msg = f"Flow report validation failed: {e}"
            self.logger.error(error_msg)
            raise ReportValidationError(error_msg) from e

    def validate_correlation_report(self, report: dict[str, Any]) -> bool:
        """
        Validate a serialized correlation report.

        Returns:
            True if valid

        Raises:
            ReportValidationError: If validation fails
        """
        try:
            _require(report, CORRELATION_REPORT_REQUIRED, "correlation report")
            _require(report["metadata"], CORRELATION_METADATA_REQUIRED, "metadata")

            self._validate_matrix(report["correlationMatrix"])

            metadata = report["metadata"]
            if metadata["validContracts"] != len(report["correlationMatrix"]):
                raise ValueError(
                    f"validContracts {metadata['validContracts']} does not match "
                    f"matrix size {len(report['correlationMatrix'])}"
                )
            if metadata["validContracts"] > metadata["totalContracts"]:
                raise ValueError("validContracts exceeds totalContracts")

            return True

        except (ValueError, TypeError, KeyError) as e:
            error_msg = f"Correlation report validation failed: {e}"
            self.logger.error(error_msg)
            raise ReportValidationError(error_msg) from e

    def _validate_asset_classes(self, asset_classes: Any) -> dict[str, float]:
        if not isinstance(asset_classes, dict) or not asset_classes:
            raise ValueError("assetClasses must be a non-empty object")

        trends = {t.value for t in Trend}
        strengths = {s.value for s in Strength}
        scores = {}

        for key, perf in asset_classes.items():
            _require(perf, ASSET_CLASS_REQUIRED, f"assetClasses.{key}")
            for field in ("performance1D", "performance1W", "performance1M", "avgPerformance"):
                if not _is_number(perf[field]):
                    raise ValueError(f"assetClasses.{key}.{field} must be a finite number, got: {perf[field]}")
            if perf["trend"] not in trends:
                raise ValueError(f"Invalid trend for {key}: {perf['trend']}")
            if perf["strength"] not in strengths:
                raise ValueError(f"Invalid strength for {key}: {perf['strength']}")
            scores[key] = perf["avgPerformance"]

        return scores

    def _validate_flows(self, flows: Any, scores: dict[str, float]) -> None:
        if not isinstance(flows, list):
            raise ValueError("flows must be a list")

        n = len(scores)
        if len(flows) > n * (n - 1) // 2:
            raise ValueError(f"{len(flows)} flows exceeds the pairwise maximum for {n} classes")

        for edge in flows:
            _require(edge, FLOW_EDGE_REQUIRED, "flow")
            source, target = edge["from"], edge["to"]
            if source not in scores or target not in scores:
                raise ValueError(f"Flow references unknown asset class: {source} -> {target}")
            if source == target:
                raise ValueError(f"Flow from {source} to itself")
            if edge["direction"] != "outflow":
                raise ValueError(f"Invalid flow direction: {edge['direction']}")

            strength = edge["strength"]
            if not _is_number(strength) or not (0 <= strength <= 1):
                raise ValueError(f"Flow strength must be between 0-1, got: {strength}")

            gap = scores[target] - scores[source]
            if gap <= SIGNIFICANCE_THRESHOLD:
                raise ValueError(f"Flow {source} -> {target} has insignificant gap {gap}")
            if abs(edge["magnitude"] - gap) > _TOLERANCE:
                raise ValueError(f"Flow {source} -> {target} magnitude {edge['magnitude']} != gap {gap}")
            if abs(strength - min(gap * STRENGTH_SCALE, 1.0)) > _TOLERANCE:
                raise ValueError(f"Flow {source} -> {target} strength {strength} does not match gap {gap}")

    def _validate_regime(self, regime: Any) -> None:
        _require(regime, ("current", "confidence", "description"), "marketRegime")

        if regime["current"] not in {label.value for label in RegimeLabel}:
            raise ValueError(f"Invalid regime: {regime['current']}")

        confidence = regime["confidence"]
        if not _is_number(confidence) or not (0 <= confidence <= 1):
            raise ValueError(f"Regime confidence must be between 0-1, got: {confidence}")

    def _validate_flow_metadata(self, metadata: dict[str, Any], flows: list[dict[str, Any]]) -> None:
        if metadata["totalFlows"] != len(flows):
            raise ValueError(f"totalFlows {metadata['totalFlows']} does not match {len(flows)} flows")

        strong = sum(1 for edge in flows if edge["strength"] > STRONG_FLOW_THRESHOLD)
        if metadata["strongFlows"] != strong:
            raise ValueError(f"strongFlows {metadata['strongFlows']} does not match {strong}")

    def _validate_matrix(self, rows: Any) -> None:
        if not isinstance(rows, list):
            raise ValueError("correlationMatrix must be a list")

        symbols = [row["symbol"] for row in rows]
        if len(set(symbols)) != len(symbols):
            raise ValueError("correlationMatrix has duplicate symbols")

        matrix = {row["symbol"]: row["correlations"] for row in rows}

        for a in symbols:
            if set(matrix[a]) != set(symbols):
                raise ValueError(f"Row {a} is not square with the matrix")
            if matrix[a][a] != 1.0:
                raise ValueError(f"Diagonal for {a} must be 1.0, got: {matrix[a][a]}")
            for b in symbols:
                r = matrix[a][b]
                if not _is_number(r) or not (-1 <= r <= 1):
                    raise ValueError(f"Correlation {a}/{b} out of range: {r}")
                if r != matrix[b][a]:
                    raise ValueError(f"Matrix not symmetric at {a}/{b}: {r} vs {matrix[b][a]}")


# Global validator instance
validator = ReportValidator()


def validate_flow_report(report: dict[str, Any]) -> bool:
    """Convenience function to validate a flow report."""
    return validator.validate_flow_report(report)


def validate_correlation_report(report: dict[str, Any]) -> bool:
    """Convenience function to validate a correlation report."""
    return validator.validate_correlation_report(report)

"""Result models for correlation, performance, flow and regime analysis.

Every record is immutable and created fresh per invocation. ``to_dict``
produces the camelCase JSON contract consumed by the dashboard.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import orjson

STRONG_FLOW_THRESHOLD = 0.5


class Trend(str, Enum):
    """Direction of an asset class's weighted score."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Strength(str, Enum):
    """Magnitude bucket of an asset class's weighted score."""
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class RegimeLabel(str, Enum):
    """Discrete market-wide classification."""
    RISK_ON = "risk_on"
    RISK_OFF = "risk_off"
    INFLATION_HEDGE = "inflation_hedge"
    NEUTRAL = "neutral"


def _dumps(payload: dict[str, Any], pretty: bool = False) -> bytes:
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(payload, option=option)


@dataclass(frozen=True)
class AssetClassPerformance:
    """Multi-horizon performance summary for one asset class."""
    class_key: str
    name: str
    perf_1d: float
    perf_1w: float
    perf_1m: float
    weighted_score: float
    trend: Trend
    strength: Strength
    contracts: tuple[str, ...] = ()
    valid_contracts: int = 0

    @property
    def is_degenerate(self) -> bool:
        """True when no member instrument contributed to the score."""
        return self.valid_contracts == 0

    @classmethod
    def zeroed(cls, class_key: str, name: str, contracts: tuple[str, ...] = ()) -> "AssetClassPerformance":
        """Performance record for a class with no usable member data."""
        return cls(
            class_key=class_key,
            name=name,
            perf_1d=0.0,
            perf_1w=0.0,
            perf_1m=0.0,
            weighted_score=0.0,
            trend=Trend.NEUTRAL,
            strength=Strength.WEAK,
            contracts=contracts,
            valid_contracts=0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "performance1D": self.perf_1d,
            "performance1W": self.perf_1w,
            "performance1M": self.perf_1m,
            "avgPerformance": self.weighted_score,
            "trend": self.trend.value,
            "strength": self.strength.value,
            "contracts": list(self.contracts),
            "validContracts": self.valid_contracts,
        }


@dataclass(frozen=True)
class FlowEdge:
    """Inferred capital rotation from an underperforming to an outperforming class."""
    from_class: str
    to_class: str
    strength: float    # 0-1, saturates at a 5% gap
    magnitude: float   # Raw weighted score gap
    reason: str
    direction: str = "outflow"

    @property
    def is_strong(self) -> bool:
        return self.strength > STRONG_FLOW_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_class,
            "to": self.to_class,
            "strength": self.strength,
            "direction": self.direction,
            "magnitude": self.magnitude,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class RegimeReport:
    """Market regime derived from the flow graph."""
    label: RegimeLabel
    confidence: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.label.value,
            "confidence": self.confidence,
            "description": self.description,
        }


@dataclass(frozen=True)
class CorrelationMatrix:
    """Square, symmetric matrix of pairwise return correlations."""
    values: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def symbols(self) -> list[str]:
        return list(self.values)

    def get(self, a: str, b: str) -> float:
        return self.values[a][b]

    def __len__(self) -> int:
        return len(self.values)

    def to_rows(self) -> list[dict[str, Any]]:
        """Row-per-symbol layout used by the heatmap."""
        return [
            {"symbol": symbol, "correlations": dict(row)}
            for symbol, row in self.values.items()
        ]


@dataclass(frozen=True)
class CorrelationReport:
    """Correlation matrix plus batch metadata."""
    matrix: CorrelationMatrix
    total_contracts: int
    valid_contracts: int
    period: str
    calculated_at: str
    data_points: int

    success = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "correlationMatrix": self.matrix.to_rows(),
            "metadata": {
                "totalContracts": self.total_contracts,
                "validContracts": self.valid_contracts,
                "period": self.period,
                "calculatedAt": self.calculated_at,
                "dataPoints": self.data_points,
            },
        }

    def to_json(self, pretty: bool = False) -> bytes:
        return _dumps(self.to_dict(), pretty)


@dataclass(frozen=True)
class AssetFlowReport:
    """Asset class performance, flow graph and regime for one invocation."""
    asset_classes: dict[str, AssetClassPerformance]
    flows: list[FlowEdge]
    regime: RegimeReport
    calculated_at: str
    valid_contracts: int = 0
    total_contracts: int = 0
    narrative: Optional[str] = None

    success = True

    @property
    def total_flows(self) -> int:
        return len(self.flows)

    @property
    def strong_flows(self) -> int:
        return sum(1 for flow in self.flows if flow.is_strong)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "assetClasses": {key: perf.to_dict() for key, perf in self.asset_classes.items()},
            "flows": [flow.to_dict() for flow in self.flows],
            "marketRegime": self.regime.to_dict(),
            "metadata": {
                "calculatedAt": self.calculated_at,
                "totalFlows": self.total_flows,
                "strongFlows": self.strong_flows,
                "validContracts": self.valid_contracts,
                "totalContracts": self.total_contracts,
            },
        }
        if self.narrative is not None:
            payload["narrative"] = self.narrative
        return payload

    def to_json(self, pretty: bool = False) -> bytes:
        return _dumps(self.to_dict(), pretty)


@dataclass(frozen=True)
class InsufficientDataResult:
    """Structured failure when too few instruments have usable history."""
    message: str
    valid_contracts: int
    total_contracts: int
    timestamp: str
    required_count: int = 2
    status_code: int = 500

    success = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "validContracts": self.valid_contracts,
            "totalContracts": self.total_contracts,
            "timestamp": self.timestamp,
        }

    def to_json(self, pretty: bool = False) -> bytes:
        return _dumps(self.to_dict(), pretty)

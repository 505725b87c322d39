"""
Rule-based market regime classification from the flow graph.

Patterns are checked in a fixed priority order and the first match wins,
regardless of which matching edge is strongest.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..config.universe import REGIME_DESCRIPTIONS
from ..logging.config import get_flow_logger, log_regime_decision
from ..models.analysis import FlowEdge, RegimeLabel, RegimeReport

DEFAULT_CONFIDENCE = 0.5


@dataclass(frozen=True)
class RegimeRule:
    """One qualifying edge pattern and the label it implies."""
    label: RegimeLabel
    confidence: float
    description: str
    matches: Callable[[FlowEdge], bool]


REGIME_RULES: tuple[RegimeRule, ...] = (
    RegimeRule(
        label=RegimeLabel.RISK_OFF,
        confidence=0.8,
        description="stocks -> bonds with strength > 0.3",
        matches=lambda e: e.from_class == "stocks" and e.to_class == "bonds" and e.strength > 0.3,
    ),
    RegimeRule(
        label=RegimeLabel.RISK_ON,
        confidence=0.8,
        description="bonds -> stocks with strength > 0.3",
        matches=lambda e: e.from_class == "bonds" and e.to_class == "stocks" and e.strength > 0.3,
    ),
    RegimeRule(
        label=RegimeLabel.INFLATION_HEDGE,
        confidence=0.7,
        description="any -> commodities with strength > 0.4",
        matches=lambda e: e.to_class == "commodities" and e.strength > 0.4,
    ),
)


def regime_description(label: RegimeLabel) -> str:
    """Fixed human-readable description for a label."""
    return REGIME_DESCRIPTIONS[label.value]


def classify_regime(flows: Iterable[FlowEdge]) -> RegimeReport:
    """
    Classify the market regime from the full set of flow edges.

    Args:
        flows: Every edge inferred for the invocation

    Returns:
        RegimeReport; neutral with confidence 0.5 when no rule matches
    """
    edges = list(flows)
    flow_logger = get_flow_logger(__name__)

    for rule in REGIME_RULES:
        matched = next((edge for edge in edges if rule.matches(edge)), None)
        if matched is None:
            continue

        log_regime_decision(
            flow_logger,
            label=rule.label.value,
            confidence=rule.confidence,
            trigger=f"{rule.description} ({matched.from_class} -> {matched.to_class}, {matched.strength:.2f})",
            edge_count=len(edges),
        )
        return RegimeReport(
            label=rule.label,
            confidence=rule.confidence,
            description=regime_description(rule.label),
        )

    log_regime_decision(
        flow_logger,
        label=RegimeLabel.NEUTRAL.value,
        confidence=DEFAULT_CONFIDENCE,
        trigger=None,
        edge_count=len(edges),
    )
    return RegimeReport(
        label=RegimeLabel.NEUTRAL,
        confidence=DEFAULT_CONFIDENCE,
        description=regime_description(RegimeLabel.NEUTRAL),
    )

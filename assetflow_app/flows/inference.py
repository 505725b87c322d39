"""
Capital flow inference between asset classes.

Asset classes are ranked by weighted score. Every pair whose score gap
exceeds the significance threshold produces one directed edge from the
underperformer to the outperformer, modelling money leaving the weaker class
and entering the stronger one.
"""

from collections.abc import Mapping

import structlog

from ..config.universe import FLOW_NARRATIVES
from ..logging.config import get_flow_logger, log_flow_edge
from ..models.analysis import AssetClassPerformance, FlowEdge

logger = structlog.get_logger(__name__)

# Gaps at or below this are noise
SIGNIFICANCE_THRESHOLD = 0.005

# A 5% gap saturates strength at 1.0
STRENGTH_SCALE = 20.0


def rank_asset_classes(performances: Mapping[str, AssetClassPerformance]) -> list[str]:
    """
    Order class keys by weighted score, best first.

    The sort is stable, so equal scores keep their configuration order.
    """
    return sorted(performances, key=lambda key: performances[key].weighted_score, reverse=True)


def flow_strength(gap: float) -> float:
    """Linear scaling of a score gap to [0, 1]."""
    return min(gap * STRENGTH_SCALE, 1.0)


def flow_reason(from_perf: AssetClassPerformance, to_perf: AssetClassPerformance) -> str:
    """Canonical narrative for well-known rotations, generic sentence otherwise."""
    canonical = FLOW_NARRATIVES.get((from_perf.class_key, to_perf.class_key))
    if canonical is not None:
        return canonical
    return (
        f"Capital rotation from underperforming {from_perf.name.lower()} "
        f"to outperforming {to_perf.name.lower()}"
    )


def infer_flows(performances: Mapping[str, AssetClassPerformance]) -> list[FlowEdge]:
    """
    Infer directed capital flow edges from asset class performance.

    For every ranked pair (i, j) with i < j the gap score[i] - score[j] is
    compared against the significance threshold. Degenerate (zeroed) classes
    take part in the ranking like any other.

    Args:
        performances: class key -> performance, in configuration order

    Returns:
        Edges in ranking order, at most n * (n - 1) / 2
    """
    ranked = rank_asset_classes(performances)

    logger.info(
        "Asset class performance ranking",
        ranking=[f"{key}: {performances[key].weighted_score * 100:.2f}%" for key in ranked]
    )

    flow_logger = get_flow_logger(__name__)
    flows: list[FlowEdge] = []

    for i, outperformer in enumerate(ranked):
        for underperformer in ranked[i + 1:]:
            to_perf = performances[outperformer]
            from_perf = performances[underperformer]

            gap = to_perf.weighted_score - from_perf.weighted_score
            if gap <= SIGNIFICANCE_THRESHOLD:
                continue

            edge = FlowEdge(
                from_class=underperformer,
                to_class=outperformer,
                strength=flow_strength(gap),
                magnitude=gap,
                reason=flow_reason(from_perf, to_perf),
            )
            flows.append(edge)
            log_flow_edge(flow_logger, edge)

    return flows

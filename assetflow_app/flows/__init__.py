"""
Capital flow inference and regime classification module.

Turns asset class performance scores into a directed flow graph and derives
a discrete market regime label from it.
"""

from .inference import infer_flows, rank_asset_classes
from .regime import classify_regime

__all__ = [
    "infer_flows",
    "rank_asset_classes",
    "classify_regime",
]

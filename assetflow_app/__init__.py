"""
AssetFlow - Cross-Asset Correlation and Capital Flow Engine

Computes pairwise return correlations across a fixed futures universe,
aggregates multi-horizon asset class performance, infers capital rotation
between asset classes and classifies the prevailing market regime.
"""

__version__ = "0.1.0"
__author__ = "AssetFlow Team"

"""
Analysis result models.

Immutable records for asset class performance, flow edges, regimes and the
report objects handed to downstream consumers.
"""

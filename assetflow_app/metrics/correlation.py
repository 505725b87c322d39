"""Pearson correlation of return series and the full pairwise matrix"""

import math

from ..models.analysis import CorrelationMatrix

CORRELATION_DECIMALS = 3


def pearson_correlation(x: list[float], y: list[float]) -> float:
    """
    Calculate the Pearson correlation coefficient of two return series

    Both series are truncated by position to the shorter length n; no date
    alignment happens after truncation.

    r = Σ(xi-mx)(yi-my) / sqrt(Σ(xi-mx)² · Σ(yi-my)²)

    Args:
        x: First return series, chronological
        y: Second return series, chronological

    Returns:
        Coefficient in [-1, 1]; 0 when n < 2, when either series has zero
        variance, or when the inputs produce a non-finite value
    """
    n = min(len(x), len(y))
    if n < 2:
        return 0.0

    xs = x[:n]
    ys = y[:n]

    mean_x = sum(xs) / n
    mean_y = sum(ys) / n

    numerator = 0.0
    sum_sq_x = 0.0
    sum_sq_y = 0.0

    for xi, yi in zip(xs, ys):
        dx = xi - mean_x
        dy = yi - mean_y
        numerator += dx * dy
        sum_sq_x += dx * dx
        sum_sq_y += dy * dy

    denominator = math.sqrt(sum_sq_x * sum_sq_y)
    if denominator == 0:
        return 0.0

    r = numerator / denominator
    if not math.isfinite(r):
        return 0.0

    # Floating error can push |r| a hair past 1
    return max(-1.0, min(1.0, r))


def round_coefficient(r: float, decimals: int = CORRELATION_DECIMALS) -> float:
    """
    Round half up, toward positive infinity on ties

    -0.1875 rounds to -0.187, not -0.188, and a small negative value rounds
    to 0.0 rather than -0.0.
    """
    scale = 10 ** decimals
    return math.floor(r * scale + 0.5) / scale


def build_correlation_matrix(returns: dict[str, list[float]]) -> CorrelationMatrix:
    """
    Build the full symmetric correlation matrix

    Each unordered pair is computed once and mirrored, which keeps the matrix
    exactly symmetric. The diagonal is set to 1.0 without computation and
    off-diagonal coefficients are stored to three decimals.

    Args:
        returns: symbol -> return series, in output order

    Returns:
        CorrelationMatrix keyed by symbol
    """
    symbols = list(returns)
    values: dict[str, dict[str, float]] = {symbol: {} for symbol in symbols}

    for i, a in enumerate(symbols):
        values[a][a] = 1.0
        for b in symbols[i + 1:]:
            r = round_coefficient(pearson_correlation(returns[a], returns[b]))
            values[a][b] = r
            values[b][a] = r

    # Rebuild rows so each follows the symbol order
    ordered = {a: {b: values[a][b] for b in symbols} for a in symbols}
    return CorrelationMatrix(values=ordered)


def shortest_series_length(returns: dict[str, list[float]]) -> int:
    """Length of the shortest return series, 0 for an empty mapping"""
    if not returns:
        return 0
    return min(len(series) for series in returns.values())

"""Tests for Pearson correlation and matrix construction."""

import math

import orjson
import pytest

from assetflow_app.metrics.correlation import (
    build_correlation_matrix,
    pearson_correlation,
    round_coefficient,
    shortest_series_length,
)


class TestPearsonCorrelation:
    """Test the pairwise coefficient."""

    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_zero_variance_yields_zero(self):
        assert pearson_correlation([0.01, 0.01, 0.01], [0.02, -0.01, 0.03]) == 0.0

    def test_fewer_than_two_points_yields_zero(self):
        assert pearson_correlation([0.01], [0.02]) == 0.0
        assert pearson_correlation([], []) == 0.0

    def test_truncates_to_shorter_series(self):
        assert pearson_correlation([1, 2, 3, 100], [1, 2, 3]) == pytest.approx(1.0)

    def test_non_finite_input_yields_zero(self):
        assert pearson_correlation([1.0, float("inf"), 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_result_within_bounds(self):
        x = [0.012, -0.004, 0.007, 0.001, -0.009, 0.003]
        y = [0.010, -0.002, 0.006, 0.002, -0.011, 0.004]

        assert -1.0 <= pearson_correlation(x, y) <= 1.0


class TestBuildCorrelationMatrix:
    """Test the full matrix."""

    @pytest.fixture
    def returns(self):
        return {
            "/ES": [0.01, -0.02, 0.015, 0.003, -0.007],
            "/NQ": [0.012, -0.025, 0.02, 0.001, -0.009],
            "/ZB": [-0.004, 0.006, -0.002, 0.001, 0.003],
        }

    def test_diagonal_is_one(self, returns):
        matrix = build_correlation_matrix(returns)

        for symbol in returns:
            assert matrix.get(symbol, symbol) == 1.0

    def test_symmetric(self, returns):
        matrix = build_correlation_matrix(returns)

        for a in returns:
            for b in returns:
                assert matrix.get(a, b) == matrix.get(b, a)

    def test_rounded_to_three_decimals(self, returns):
        matrix = build_correlation_matrix(returns)
        r = matrix.get("/ES", "/ZB")

        assert r == round(r, 3)
        assert r == round_coefficient(pearson_correlation(returns["/ES"], returns["/ZB"]))

    def test_weak_negative_serializes_as_zero(self):
        # r is about -0.0002 here
        returns = {
            "/A": [1.0, -1.0, 1.0, -1.0],
            "/B": [0.9998, 1.0002, -1.0002, -0.9998],
        }
        r = pearson_correlation(returns["/A"], returns["/B"])
        assert -0.0005 < r < 0

        rows = build_correlation_matrix(returns).to_rows()

        assert b"-0.0" not in orjson.dumps(rows)

    def test_rows_follow_input_order(self, returns):
        rows = build_correlation_matrix(returns).to_rows()

        assert [row["symbol"] for row in rows] == ["/ES", "/NQ", "/ZB"]
        assert list(rows[2]["correlations"]) == ["/ES", "/NQ", "/ZB"]

    def test_shortest_series_length(self, returns):
        returns["/ZB"] = returns["/ZB"][:3]

        assert shortest_series_length(returns) == 3
        assert shortest_series_length({}) == 0


class TestRoundCoefficient:
    """Test coefficient rounding."""

    @pytest.mark.parametrize("r,expected", [
        (0.1234, 0.123),
        (0.1236, 0.124),
        (0.1875, 0.188),
        (-0.1875, -0.187),
        (-0.1876, -0.188),
        (1.0, 1.0),
        (-1.0, -1.0),
    ])
    def test_half_up(self, r, expected):
        assert round_coefficient(r) == expected

    def test_small_negative_is_positive_zero(self):
        r = round_coefficient(-0.0004)

        assert r == 0.0
        assert math.copysign(1.0, r) == 1.0

    def test_custom_places(self):
        assert round_coefficient(0.25, decimals=1) == 0.3
        assert round_coefficient(-0.25, decimals=1) == -0.2

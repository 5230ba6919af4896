"""Tests for trend, volatility and level analysis."""

import math

import numpy as np
import pytest

from pricefeed.market.analysis import (
    analyze_symbol,
    analyze_trend,
    calculate_volatility,
    fibonacci_levels,
    find_resistance,
    find_support,
)


class TestAnalyzeTrend:
    """The last 10 closes are compared against the 10 before them."""

    @pytest.mark.parametrize(
        "recent, expected",
        [
            (103.0, "strong uptrend"),
            (101.0, "uptrend"),
            (100.4, "sideways"),
            (100.0, "sideways"),
            (99.6, "sideways"),
            (99.0, "downtrend"),
            (97.0, "strong downtrend"),
        ],
    )
    def test_classification(self, history_factory, recent, expected):
        history = history_factory([100.0] * 10 + [recent] * 10)
        assert analyze_trend(history) == expected

    def test_only_last_twenty_points_matter(self, history_factory):
        history = history_factory([1.0] * 30 + [100.0] * 10 + [103.0] * 10)
        assert analyze_trend(history) == "strong uptrend"

    def test_short_history_is_unknown(self, history_factory):
        assert analyze_trend(history_factory([100.0] * 19)) == "unknown"

    def test_empty_history_is_unknown(self):
        assert analyze_trend([]) == "unknown"


class TestCalculateVolatility:
    def test_short_history_is_zero(self, history_factory):
        assert calculate_volatility(history_factory([100.0, 110.0] * 9)) == 0.0

    def test_constant_prices_have_no_volatility(self, history_factory):
        assert calculate_volatility(history_factory([50.0] * 30)) == 0.0

    def test_annualized_population_std_of_returns(self, history_factory):
        closes = [100 + 3 * math.sin(i) for i in range(40)]
        returns = np.diff(closes) / np.array(closes[:-1])
        expected = float(np.std(returns) * math.sqrt(252) * 100)
        assert calculate_volatility(history_factory(closes)) == pytest.approx(expected)

    def test_constant_growth_has_no_volatility(self, history_factory):
        closes = [100 * 1.01**i for i in range(30)]
        assert calculate_volatility(history_factory(closes)) == pytest.approx(0.0, abs=1e-9)


class TestSupportResistance:
    def test_short_history_is_none(self, history_factory):
        history = history_factory([100.0] * 19)
        assert find_support(history) is None
        assert find_resistance(history) is None

    def test_uses_last_fifty_points(self, history_factory):
        # Closes 1..60 with lows one below and highs one above
        history = history_factory([float(i) for i in range(1, 61)])
        assert find_support(history) == 15.0  # Lows 10..59, index 5 ascending
        assert find_resistance(history) == 56.0  # Highs 12..61, index 5 descending

    def test_fewer_than_fifty_points(self, history_factory):
        history = history_factory([float(i) for i in range(1, 26)])
        assert find_support(history) == 2.0  # Lows 0..24, index floor(2.5)
        assert find_resistance(history) == 24.0  # Highs 2..26, index 2 from the top

    def test_support_below_resistance(self, history_factory):
        history = history_factory([100 + 5 * math.sin(i / 4) for i in range(80)])
        assert find_support(history) < find_resistance(history)


class TestFibonacciLevels:
    def test_short_history_is_none(self, history_factory):
        assert fibonacci_levels(history_factory([1.0] * 10)) is None

    def test_levels_span_recent_range(self, history_factory):
        levels = fibonacci_levels(history_factory([float(i) for i in range(1, 61)]))
        # Last 50 bars: high 61, low 10
        assert levels["level_0"] == 61.0
        assert levels["level_100"] == 10.0
        assert levels["level_500"] == pytest.approx(35.5)
        assert levels["level_618"] == pytest.approx(61 - 51 * 0.618)
        assert list(levels) == [
            "level_0",
            "level_236",
            "level_382",
            "level_500",
            "level_618",
            "level_786",
            "level_100",
        ]


class TestAnalyzeSymbol:
    def test_combines_everything(self, history_factory, quote_factory):
        quote = quote_factory("AAPL")
        history = history_factory([100.0] * 10 + [103.0] * 10)
        result = analyze_symbol(quote, history)

        assert result.quote is quote
        assert result.trend == "strong uptrend"
        assert result.indicators is not None
        assert result.volatility > 0
        assert result.support is not None
        assert result.resistance is not None
        assert result.to_dict()["quote"]["symbol"] == "AAPL"

    def test_short_history_degrades_gracefully(self, history_factory, quote_factory):
        result = analyze_symbol(quote_factory("NEW"), history_factory([10.0] * 5))

        assert result.indicators is None
        assert result.trend == "unknown"
        assert result.volatility == 0.0
        assert result.support is None
        assert result.resistance is None
        assert result.fibonacci is None
        assert result.to_dict()["indicators"] is None

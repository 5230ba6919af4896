"""Trend, volatility and support/resistance analysis of a price history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from .indicators import IndicatorSet, technical_indicators
from .models import HistoricalPoint, Quote

MIN_ANALYSIS_POINTS = 20
TRADING_DAYS_PER_YEAR = 252
LEVEL_LOOKBACK = 50
FIBONACCI_LEVELS: tuple[tuple[str, float], ...] = (
    ("level_0", 0.0),
    ("level_236", 0.236),
    ("level_382", 0.382),
    ("level_500", 0.5),
    ("level_618", 0.618),
    ("level_786", 0.786),
    ("level_100", 1.0),
)


def analyze_trend(history: Sequence[HistoricalPoint]) -> str:
    """Classify the trend by comparing the last 10 closes with the 10 before.

    Returns 'strong uptrend', 'uptrend', 'sideways', 'downtrend',
    'strong downtrend', or 'unknown' with fewer than 20 points.
    """
    if len(history) < MIN_ANALYSIS_POINTS:
        return "unknown"

    recent = np.mean([p.close for p in history[-10:]])
    older = np.mean([p.close for p in history[-20:-10]])
    if older == 0:
        return "unknown"
    change = (recent - older) / older * 100

    if change > 2:
        return "strong uptrend"
    if change > 0.5:
        return "uptrend"
    if change < -2:
        return "strong downtrend"
    if change < -0.5:
        return "downtrend"
    return "sideways"


def calculate_volatility(history: Sequence[HistoricalPoint]) -> float:
    """Annualized volatility of daily simple returns, in percent. 0.0 under 20 points."""
    if len(history) < MIN_ANALYSIS_POINTS:
        return 0.0
    closes = np.asarray([p.close for p in history], dtype=float)
    returns = np.diff(closes) / closes[:-1]
    return float(np.std(returns) * math.sqrt(TRADING_DAYS_PER_YEAR) * 100)


def _level_index(count: int) -> int:
    return math.floor(count * 0.1)


def find_support(history: Sequence[HistoricalPoint]) -> float | None:
    """10th-percentile low of the last 50 points."""
    if len(history) < MIN_ANALYSIS_POINTS:
        return None
    lows = sorted(p.low for p in history[-LEVEL_LOOKBACK:])
    return lows[_level_index(len(lows))]


def find_resistance(history: Sequence[HistoricalPoint]) -> float | None:
    """90th-percentile high of the last 50 points (same rank as support, from the top)."""
    if len(history) < MIN_ANALYSIS_POINTS:
        return None
    highs = sorted((p.high for p in history[-LEVEL_LOOKBACK:]), reverse=True)
    return highs[_level_index(len(highs))]


def fibonacci_levels(history: Sequence[HistoricalPoint]) -> dict[str, float] | None:
    """Retracement levels between the high and low of the last 50 points.

    Keys are 'level_0' (the high) through 'level_100' (the low).
    """
    if len(history) < MIN_ANALYSIS_POINTS:
        return None
    window = history[-LEVEL_LOOKBACK:]
    high = max(p.high for p in window)
    low = min(p.low for p in window)
    span = high - low
    return {label: high - span * ratio for label, ratio in FIBONACCI_LEVELS}


@dataclass(frozen=True, slots=True)
class SymbolAnalysis:
    """Quote plus everything derived from the symbol's history."""

    quote: Quote
    indicators: IndicatorSet | None
    trend: str
    volatility: float
    support: float | None
    resistance: float | None
    fibonacci: dict[str, float] | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "quote": self.quote.to_dict(),
            "indicators": self.indicators.to_dict() if self.indicators else None,
            "trend": self.trend,
            "volatility": self.volatility,
            "support": self.support,
            "resistance": self.resistance,
            "fibonacci": self.fibonacci,
        }


def analyze_symbol(quote: Quote, history: Sequence[HistoricalPoint]) -> SymbolAnalysis:
    return SymbolAnalysis(
        quote=quote,
        indicators=technical_indicators(history),
        trend=analyze_trend(history),
        volatility=calculate_volatility(history),
        support=find_support(history),
        resistance=find_resistance(history),
        fibonacci=fibonacci_levels(history),
    )

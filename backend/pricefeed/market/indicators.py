"""Technical indicators over price series.

Every function takes series ordered oldest -> newest and returns None when
the series is too short for its window. There are no partial results: a
20-period average over 15 points is None, not a 15-period average.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from .models import HistoricalPoint

# Below this many points technical_indicators() reports nothing at all
MIN_INDICATOR_POINTS = 20


@dataclass(frozen=True, slots=True)
class MACD:
    macd: float
    signal: float | None
    histogram: float | None


@dataclass(frozen=True, slots=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float


@dataclass(frozen=True, slots=True)
class Stochastic:
    k: float
    d: float | None


@dataclass(frozen=True, slots=True)
class IndicatorSet:
    """Latest value of each indicator for one symbol."""

    sma20: float | None
    sma50: float | None
    sma200: float | None
    ema12: float | None
    ema26: float | None
    rsi: float | None
    macd: MACD | None
    bollinger: BollingerBands | None
    stochastic: Stochastic | None
    atr: float | None
    volume_sma: float | None
    volume_ratio: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def sma(series: Sequence[float], period: int) -> float | None:
    """Arithmetic mean of the last `period` values."""
    if period <= 0 or len(series) < period:
        return None
    return float(np.mean(series[-period:]))


def _ema_path(series: Sequence[float], period: int) -> list[float]:
    """Running EMA at every index, seeded with the first value."""
    k = 2 / (period + 1)
    value = float(series[0])
    path = [value]
    for price in series[1:]:
        value = price * k + value * (1 - k)
        path.append(value)
    return path


def ema(series: Sequence[float], period: int) -> float | None:
    """Exponential moving average over the whole series.

    Seeded with series[0], so the result depends on all the history given,
    not only the last `period` points. Pass a few multiples of `period` for
    the seed to wash out.
    """
    if period <= 0 or len(series) < period:
        return None
    return _ema_path(series, period)[-1]


def rsi(series: Sequence[float], period: int = 14) -> float | None:
    """Relative Strength Index from simple average gain/loss of the last `period` moves."""
    if period <= 0 or len(series) < period + 1:
        return None
    deltas = np.diff(np.asarray(series[-(period + 1):], dtype=float))
    avg_gain = deltas.clip(min=0).mean()
    avg_loss = (-deltas.clip(max=0)).mean()
    if avg_loss == 0:
        return 100.0
    return float(100 - 100 / (1 + avg_gain / avg_loss))


def macd(
    series: Sequence[float], fast: int = 12, slow: int = 26, signal: int = 9
) -> MACD | None:
    """MACD line, signal line and histogram.

    The signal line is the EMA of the MACD line's history (its value at every
    prefix of the series with at least `slow` points). Until `signal` such
    values exist, signal and histogram are None.
    """
    if len(series) < slow:
        return None
    fast_path = _ema_path(series, fast)
    slow_path = _ema_path(series, slow)
    line = [f - s for f, s in zip(fast_path[slow - 1:], slow_path[slow - 1:])]

    signal_value = ema(line, signal)
    histogram = line[-1] - signal_value if signal_value is not None else None
    return MACD(macd=line[-1], signal=signal_value, histogram=histogram)


def bollinger_bands(
    series: Sequence[float], period: int = 20, num_std: float = 2.0
) -> BollingerBands | None:
    """SMA(period) plus/minus num_std population standard deviations."""
    middle = sma(series, period)
    if middle is None:
        return None
    half_width = num_std * float(np.std(series[-period:]))
    return BollingerBands(upper=middle + half_width, middle=middle, lower=middle - half_width)


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
    smooth: int = 3,
) -> Stochastic | None:
    """%K of the latest close within the `period` high-low range; %D is its `smooth`-bar mean."""
    n = min(len(highs), len(lows), len(closes))
    if period <= 0 or n < period:
        return None

    def percent_k(end: int) -> float:
        highest = max(highs[end - period:end])
        lowest = min(lows[end - period:end])
        if highest == lowest:
            return 50.0
        return (closes[end - 1] - lowest) / (highest - lowest) * 100

    ks = [percent_k(end) for end in range(max(period, n - smooth + 1), n + 1)]
    d = float(np.mean(ks)) if len(ks) == smooth else None
    return Stochastic(k=ks[-1], d=d)


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> float | None:
    """Average True Range over the last `period` bars."""
    if period <= 0 or min(len(highs), len(lows), len(closes)) < period + 1:
        return None
    high = np.asarray(highs[-period:], dtype=float)
    low = np.asarray(lows[-period:], dtype=float)
    prev_close = np.asarray(closes[-(period + 1):-1], dtype=float)
    true_range = np.maximum(high - low, np.maximum(np.abs(high - prev_close), np.abs(low - prev_close)))
    return float(true_range.mean())


def technical_indicators(history: Sequence[HistoricalPoint]) -> IndicatorSet | None:
    """Compute the standard indicator set from a history. None under 20 points."""
    if len(history) < MIN_INDICATOR_POINTS:
        return None

    closes = [p.close for p in history]
    highs = [p.high for p in history]
    lows = [p.low for p in history]
    volumes = [float(p.volume) for p in history]

    volume_sma = sma(volumes, 20)
    return IndicatorSet(
        sma20=sma(closes, 20),
        sma50=sma(closes, 50),
        sma200=sma(closes, 200),
        ema12=ema(closes, 12),
        ema26=ema(closes, 26),
        rsi=rsi(closes, 14),
        macd=macd(closes),
        bollinger=bollinger_bands(closes, 20, 2),
        stochastic=stochastic(highs, lows, closes, 14),
        atr=atr(highs, lows, closes, 14),
        volume_sma=volume_sma,
        volume_ratio=volumes[-1] / volume_sma if volume_sma else None,
    )

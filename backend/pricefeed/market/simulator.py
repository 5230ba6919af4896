"""GBM-based offline market data provider."""

from __future__ import annotations

import logging
import math

import numpy as np

from .interface import DEFAULT_TIMEOUT, ProviderAdapter
from .models import HistoricalPoint, Quote, now_ms
from .reference import period_seconds
from .seed_prices import DEFAULT_PARAMS, SEED_PRICES, SYMBOL_PARAMS, UNKNOWN_PRICE_RANGE

logger = logging.getLogger(__name__)

_BAR_SECONDS: dict[str, int] = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "30m": 1_800,
    "60m": 3_600,
    "1h": 3_600,
    "1d": 86_400,
    "1wk": 604_800,
    "1mo": 2_592_000,
}

SECONDS_PER_YEAR = 365 * 86_400
MAX_BARS = 2_000


class GBMSimulator:
    """Geometric Brownian Motion price generator.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Where:
        mu     = annualized drift (expected return)
        sigma  = annualized volatility
        dt     = time step as a fraction of a year
        Z      = standard normal random variable
    """

    # One poll interval (30s) of a 6.5h, 252-day trading year
    TICK_DT = 30 / (252 * 6.5 * 3600)

    def __init__(self, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)
        self._prices: dict[str, float] = {}

    def price(self, symbol: str) -> float:
        """Current simulated price, seeding the symbol on first sight."""
        if symbol not in self._prices:
            if symbol in SEED_PRICES:
                self._prices[symbol] = SEED_PRICES[symbol]
            else:
                low, high = UNKNOWN_PRICE_RANGE
                self._prices[symbol] = float(self._rng.uniform(low, high))
        return self._prices[symbol]

    def step(self, symbol: str, dt: float = TICK_DT) -> float:
        """Advance one symbol by dt and return the new price."""
        self._prices[symbol] = self.path(symbol, 1, dt)[-1]
        return self._prices[symbol]

    def path(self, symbol: str, steps: int, dt: float) -> list[float]:
        """Generate `steps` prices following on from the current price (not stored)."""
        params = SYMBOL_PARAMS.get(symbol, DEFAULT_PARAMS)
        mu, sigma = params["mu"], params["sigma"]
        z = self._rng.standard_normal(steps)
        log_returns = (mu - 0.5 * sigma**2) * dt + sigma * math.sqrt(dt) * z
        return list(self.price(symbol) * np.exp(np.cumsum(log_returns)))


class SimulatorAdapter(ProviderAdapter):
    """ProviderAdapter that invents prices instead of calling a provider.

    For development and demos without API keys. It always answers, so put it
    last in the fallback chain.
    """

    name = "Simulator"

    def __init__(self, seed: int | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(timeout=timeout)
        self._sim = GBMSimulator(seed=seed)
        self._rng = np.random.default_rng(seed)
        self._previous_close: dict[str, float] = {}

    async def _fetch_quote(self, symbol: str) -> Quote | None:
        previous_close = self._previous_close.setdefault(symbol, self._sim.price(symbol))
        price = self._sim.step(symbol)
        change = price - previous_close
        return Quote(
            symbol=symbol,
            price=round(price, 2),
            change=round(change, 4),
            change_percent=round(change / previous_close * 100, 4),
            volume=int(self._rng.integers(100_000, 5_000_000)),
            high=round(max(price, previous_close), 2),
            low=round(min(price, previous_close), 2),
            open=round(previous_close, 2),
            previous_close=round(previous_close, 2),
            timestamp=now_ms(),
            source=self.name,
        )

    async def _fetch_historical(
        self, symbol: str, period: str, interval: str
    ) -> list[HistoricalPoint] | None:
        bar_seconds = _BAR_SECONDS.get(interval, 86_400)
        bars = max(1, min(MAX_BARS, period_seconds(period) // bar_seconds))
        # Scale the walk so its last close is the current simulated price
        current = self._sim.price(symbol)
        closes = np.asarray(self._sim.path(symbol, bars + 1, bar_seconds / SECONDS_PER_YEAR))
        closes = closes * (current / closes[-1])
        closes[-1] = current
        wicks = np.abs(self._rng.normal(0.0, 0.004, size=(bars, 2)))
        volumes = self._rng.integers(100_000, 5_000_000, size=bars)
        start = now_ms() - bars * bar_seconds * 1000

        points = []
        for i in range(bars):
            open_, close = closes[i], closes[i + 1]
            points.append(
                HistoricalPoint(
                    date=start + i * bar_seconds * 1000,
                    open=round(open_, 2),
                    high=round(max(open_, close) * (1 + wicks[i, 0]), 2),
                    low=round(min(open_, close) * (1 - wicks[i, 1]), 2),
                    close=round(close, 2),
                    volume=int(volumes[i]),
                )
            )
        logger.debug("Simulated %d %s bars for %s", bars, interval, symbol)
        return points

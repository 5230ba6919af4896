"""Fixtures for market data tests.

Provides scriptable in-memory provider adapters, a controllable clock for
the cache, and builders for quotes and price histories, so nothing here
touches the network.
"""

import asyncio

import pytest

from pricefeed.market.interface import ProviderAdapter
from pricefeed.market.models import HistoricalPoint, Quote

DAY_MS = 86_400_000
START_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


class FakeAdapter(ProviderAdapter):
    """ProviderAdapter that answers from canned data and records its calls."""

    def __init__(
        self,
        name: str,
        quotes: dict | None = None,
        history: dict | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
        timeout: float = 1.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.name = name
        self.quotes = quotes or {}
        self.history = history or {}
        self.error = error
        self.delay = delay
        self.quote_calls: list[str] = []
        self.historical_calls: list[tuple[str, str, str]] = []
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def _fetch_quote(self, symbol):
        self.quote_calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.quotes.get(symbol)

    async def _fetch_historical(self, symbol, period, interval):
        self.historical_calls.append((symbol, period, interval))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.history.get(symbol)


class FakeClock:
    """Callable millisecond clock that only moves when told to."""

    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_quote(symbol: str = "AAPL", price: float = 150.0, source: str = "Test", **overrides) -> Quote:
    fields = {
        "symbol": symbol,
        "price": price,
        "change": 1.5,
        "change_percent": 1.01,
        "volume": 1_000_000,
        "high": price + 1,
        "low": price - 1,
        "open": price - 0.5,
        "previous_close": price - 1.5,
        "timestamp": START_MS,
        "source": source,
    }
    fields.update(overrides)
    return Quote(**fields)


def make_history(closes, spread: float = 1.0, volume: int = 1_000_000) -> list[HistoricalPoint]:
    """Daily bars with the given closes; high/low sit `spread` above/below the close."""
    return [
        HistoricalPoint(
            date=START_MS + i * DAY_MS,
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def fake_adapter():
    return FakeAdapter


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def quote_factory():
    return make_quote


@pytest.fixture
def history_factory():
    return make_history

"""Data models for market data."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any


def normalize_symbol(symbol: str) -> str:
    """Canonical form of a ticker symbol: stripped and uppercase."""
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise ValueError("symbol must be a non-empty string")
    return normalized


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable snapshot of one symbol's price as reported by a provider."""

    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int
    high: float
    low: float
    open: float
    previous_close: float
    timestamp: int  # Unix milliseconds
    source: str

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat' relative to the previous close."""
        if self.change > 0:
            return "up"
        elif self.change < 0:
            return "down"
        return "flat"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON / SSE transmission."""
        data = asdict(self)
        data["direction"] = self.direction
        return data


@dataclass(frozen=True, slots=True)
class HistoricalPoint:
    """One OHLCV bar. Sequences of these are ordered oldest first."""

    date: int  # Unix milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SectorPerformance:
    """Headline numbers for a sector, taken from its tracking ETF."""

    symbol: str
    price: float
    change: float
    change_percent: float

    @classmethod
    def from_quote(cls, quote: Quote) -> SectorPerformance:
        return cls(
            symbol=quote.symbol,
            price=quote.price,
            change=quote.change,
            change_percent=quote.change_percent,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MarketEvent:
    """A single item on the service's event stream.

    kind is one of:
        'quote'  - a get_quote() call fetched fresh data from a provider
        'update' - the poller refreshed a subscribed symbol (quote or error)
        'error'  - the service failed to initialize one of its providers
    """

    kind: str
    symbol: str | None = None
    quote: Quote | None = None
    error: BaseException | None = None
    timestamp: int = field(default_factory=now_ms)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "symbol": self.symbol,
            "quote": self.quote.to_dict() if self.quote else None,
            "error": str(self.error) if self.error else None,
            "timestamp": self.timestamp,
        }

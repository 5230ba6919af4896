"""Exception hierarchy for the market data subsystem."""

from __future__ import annotations


class MarketDataError(Exception):
    """Base class for market data errors."""


class ProviderTransientError(MarketDataError):
    """A provider call failed for a reason that may clear up on its own.

    Timeouts, network errors, HTTP 429 and 5xx responses. Raised inside an
    adapter and absorbed by it; never seen by callers of the service.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class NoDataAvailable(MarketDataError):
    """Every provider in the fallback chain came back empty for one request."""

    def __init__(self, symbol: str, operation: str) -> None:
        super().__init__(f"No {operation} data available for {symbol}")
        self.symbol = symbol
        self.operation = operation

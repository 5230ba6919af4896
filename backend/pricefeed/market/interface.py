"""Abstract interface for market data providers."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TypeVar

import httpx

from .exceptions import ProviderTransientError
from .models import HistoricalPoint, Quote

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0

# Payload shapes we did not expect are treated like a provider with no data
_MALFORMED_PAYLOAD_ERRORS = (KeyError, ValueError, TypeError, IndexError, AttributeError)


class ProviderAdapter(ABC):
    """Contract for one external market data provider.

    Callers use fetch_quote() / fetch_historical(). Those never raise for a
    missing symbol, a timeout, a network failure or a garbled payload: they log
    and return None so the fallback chain can move on to the next provider.

    Subclasses implement _fetch_quote() / _fetch_historical() and are free to
    raise ProviderTransientError, httpx errors or payload errors from them.

    Lifecycle:
        adapter = AlphaVantageAdapter(api_key="...")
        await adapter.start()
        quote = await adapter.fetch_quote("AAPL")
        await adapter.close()
    """

    name: str = "provider"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Seconds allowed per provider call."""
        return self._timeout

    async def start(self) -> None:
        """Acquire clients or sessions. Default is a no-op."""

    async def close(self) -> None:
        """Release clients or sessions. Safe to call multiple times."""

    async def fetch_quote(self, symbol: str) -> Quote | None:
        return await self._guarded("quote", symbol, self._fetch_quote(symbol))

    async def fetch_historical(
        self, symbol: str, period: str = "1y", interval: str = "1d"
    ) -> list[HistoricalPoint] | None:
        points = await self._guarded(
            "historical", symbol, self._fetch_historical(symbol, period, interval)
        )
        return points or None

    @abstractmethod
    async def _fetch_quote(self, symbol: str) -> Quote | None:
        """Fetch and normalize a quote. Return None when the provider has nothing."""

    async def _fetch_historical(
        self, symbol: str, period: str, interval: str
    ) -> list[HistoricalPoint] | None:
        """Fetch and normalize a history, oldest first. Quote-only providers keep this."""
        return None

    async def _guarded(self, operation: str, symbol: str, call: Awaitable[T]) -> T | None:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("%s %s timed out for %s after %.1fs", self.name, operation, symbol, self._timeout)
        except ProviderTransientError as e:
            logger.warning("%s %s failed for %s: %s", self.name, operation, symbol, e)
        except httpx.HTTPError as e:
            logger.warning("%s %s HTTP error for %s: %s", self.name, operation, symbol, e)
        except _MALFORMED_PAYLOAD_ERRORS as e:
            logger.warning(
                "%s %s returned an unexpected payload for %s: %s: %s",
                self.name,
                operation,
                symbol,
                type(e).__name__,
                e,
            )
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

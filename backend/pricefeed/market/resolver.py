"""Ordered fallback across provider adapters."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from .exceptions import NoDataAvailable
from .interface import ProviderAdapter
from .models import HistoricalPoint, Quote

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackResolver:
    """Tries adapters in registration order until one returns data.

    The order is fixed at construction. Adapters after the first one that
    answers are not called. NoDataAvailable is raised only when every adapter
    returned None.
    """

    def __init__(self, adapters: Sequence[ProviderAdapter]) -> None:
        self._adapters: tuple[ProviderAdapter, ...] = tuple(adapters)

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters

    async def resolve_quote(self, symbol: str) -> Quote:
        return await self._first(
            "quote", symbol, lambda adapter: adapter.fetch_quote(symbol)
        )

    async def resolve_historical(
        self, symbol: str, period: str = "1y", interval: str = "1d"
    ) -> list[HistoricalPoint]:
        return await self._first(
            "historical",
            symbol,
            lambda adapter: adapter.fetch_historical(symbol, period, interval),
        )

    async def _first(
        self,
        operation: str,
        symbol: str,
        call: Callable[[ProviderAdapter], Awaitable[T | None]],
    ) -> T:
        for adapter in self._adapters:
            result = await call(adapter)
            if result is not None:
                logger.debug("%s for %s answered by %s", operation, symbol, adapter.name)
                return result
            logger.debug("%s had no %s data for %s, trying next provider", adapter.name, operation, symbol)

        logger.warning("All %d providers failed %s for %s", len(self._adapters), operation, symbol)
        raise NoDataAvailable(symbol, operation)

"""MarketDataService: the public face of the market data subsystem."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from typing import TypeVar

from .analysis import SymbolAnalysis, analyze_symbol
from .cache import HISTORICAL_TTL_MS, QUOTE_TTL_MS, TTLCache, historical_key, quote_key
from .events import EventHub, EventStream
from .exceptions import MarketDataError
from .interface import ProviderAdapter
from .models import HistoricalPoint, MarketEvent, Quote, SectorPerformance, normalize_symbol
from .poller import QuotePoller, SubscriptionRegistry
from .reference import MARKET_INDICES, SECTOR_ETFS
from .resolver import FallbackResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MarketDataService:
    """Quotes, history and analytics over a fixed chain of providers.

    Owns its cache, subscription registry, poller and event channel. Nothing
    else mutates them; there is no module-level instance.

    Lifecycle:
        service = create_market_data_service()
        await service.start()
        service.subscribe("AAPL")
        async for event in service.events():
            ...
        await service.destroy()
    """

    def __init__(
        self,
        adapters: Sequence[ProviderAdapter],
        update_interval: float = 30.0,
        cache: TTLCache | None = None,
        quote_ttl_ms: int = QUOTE_TTL_MS,
        historical_ttl_ms: int = HISTORICAL_TTL_MS,
    ) -> None:
        self._adapters = list(adapters)
        self._resolver = FallbackResolver(self._adapters)
        self._cache = cache if cache is not None else TTLCache()
        self._quote_ttl_ms = quote_ttl_ms
        self._historical_ttl_ms = historical_ttl_ms
        self._registry = SubscriptionRegistry()
        self._events = EventHub()
        self._poller = QuotePoller(
            registry=self._registry,
            fetch=self.get_quote,
            publish=self._events.publish,
            interval=update_interval,
        )
        self._destroyed = False

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        return self._resolver.adapters

    @property
    def poller(self) -> QuotePoller:
        return self._poller

    # --- Lifecycle ---

    async def start(self) -> None:
        """Start every adapter, then the poller.

        An adapter that fails to start is reported as an 'error' event and left
        in the chain, where it will simply answer None.
        """
        for adapter in self._adapters:
            try:
                await adapter.start()
            except Exception as e:
                logger.exception("Failed to start provider %s", adapter.name)
                self._events.publish(MarketEvent(kind="error", error=e))
        await self._poller.start()
        logger.info(
            "Market data service started: %s",
            " -> ".join(adapter.name for adapter in self._adapters) or "no providers",
        )

    async def destroy(self) -> None:
        """Stop polling, close providers, drop cache/subscriptions, end event streams."""
        if self._destroyed:
            return
        self._destroyed = True
        await self._poller.stop()
        for adapter in self._adapters:
            try:
                await adapter.close()
            except Exception:
                logger.exception("Failed to close provider %s", adapter.name)
        self._cache.clear()
        self._registry.clear()
        self._events.close()
        logger.info("Market data service destroyed")

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError("MarketDataService has been destroyed")

    # --- Quotes and history ---

    async def get_quote(self, symbol: str) -> Quote:
        """Latest quote, from cache if fresh. Raises NoDataAvailable."""
        self._ensure_alive()
        symbol = normalize_symbol(symbol)
        key = quote_key(symbol)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Quote cache hit: %s", symbol)
            return cached

        quote = await self._resolver.resolve_quote(symbol)
        self._cache.set(key, quote, self._quote_ttl_ms)
        self._events.publish(MarketEvent(kind="quote", symbol=symbol, quote=quote))
        return quote

    async def get_historical_data(
        self, symbol: str, period: str = "1y", interval: str = "1d"
    ) -> list[HistoricalPoint]:
        """OHLCV history oldest first, from cache if fresh. Raises NoDataAvailable."""
        self._ensure_alive()
        symbol = normalize_symbol(symbol)
        key = historical_key(symbol, period, interval)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Historical cache hit: %s %s/%s", symbol, period, interval)
            return list(cached)

        points = await self._resolver.resolve_historical(symbol, period, interval)
        self._cache.set(key, tuple(points), self._historical_ttl_ms)
        return list(points)

    # --- Market overview ---

    async def get_market_indices(self) -> dict[str, Quote]:
        """Quotes for the benchmark ETFs. Symbols that fail are left out."""
        results = await self._gather_tolerant(
            MARKET_INDICES, (self.get_quote(symbol) for symbol in MARKET_INDICES), "index"
        )
        return dict(results)

    async def get_sector_performance(self) -> dict[str, SectorPerformance]:
        """Performance of each sector via its ETF. Sectors that fail are left out."""
        sectors = list(SECTOR_ETFS)
        results = await self._gather_tolerant(
            sectors, (self.get_quote(SECTOR_ETFS[sector]) for sector in sectors), "sector"
        )
        return {sector: SectorPerformance.from_quote(quote) for sector, quote in results}

    async def get_market_analysis(self, symbols: Iterable[str]) -> dict[str, SymbolAnalysis]:
        """Quote, indicators, trend, volatility and levels per symbol.

        Symbols whose quote or one-year daily history cannot be fetched are
        logged and left out so one bad symbol does not sink the batch.
        """
        normalized = list(dict.fromkeys(normalize_symbol(s) for s in symbols))
        results = await self._gather_tolerant(
            normalized, (self._analyze(symbol) for symbol in normalized), "analysis"
        )
        return dict(results)

    async def _analyze(self, symbol: str) -> SymbolAnalysis:
        quote = await self.get_quote(symbol)
        history = await self.get_historical_data(symbol, "1y", "1d")
        return analyze_symbol(quote, history)

    async def _gather_tolerant(
        self, labels: Sequence[str], calls: Iterable[Awaitable[T]], what: str
    ) -> list[tuple[str, T]]:
        results = await asyncio.gather(*calls, return_exceptions=True)
        collected = []
        for label, result in zip(labels, results):
            if isinstance(result, MarketDataError):
                logger.warning("Skipping %s %s: %s", what, label, result)
            elif isinstance(result, BaseException):
                raise result
            else:
                collected.append((label, result))
        return collected

    # --- Subscriptions and events ---

    def subscribe(self, symbol: str) -> None:
        """Watch a symbol. The next poll cycle will include it."""
        self._ensure_alive()
        symbol = self._registry.add(symbol)
        logger.info("Subscribed to updates for %s", symbol)

    def unsubscribe(self, symbol: str) -> None:
        """Stop watching a symbol. No-op if not subscribed."""
        symbol = self._registry.discard(symbol)
        logger.info("Unsubscribed from updates for %s", symbol)

    def subscriptions(self) -> list[str]:
        return self._registry.snapshot()

    def events(self) -> EventStream:
        """A new stream of every 'quote', 'update' and 'error' event from now on.

        After destroy() the stream is already ended.
        """
        return self._events.stream()

"""Subscription registry and the periodic quote poller."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .exceptions import MarketDataError
from .models import MarketEvent, Quote, normalize_symbol

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """The set of symbols being watched. Membership only."""

    def __init__(self) -> None:
        self._symbols: set[str] = set()

    def add(self, symbol: str) -> str:
        """Add a symbol. No-op if already present. Returns the normalized symbol."""
        symbol = normalize_symbol(symbol)
        self._symbols.add(symbol)
        return symbol

    def discard(self, symbol: str) -> str:
        """Remove a symbol. No-op if not present. Returns the normalized symbol."""
        symbol = normalize_symbol(symbol)
        self._symbols.discard(symbol)
        return symbol

    def snapshot(self) -> list[str]:
        """Copy of the current members, sorted."""
        return sorted(self._symbols)

    def clear(self) -> None:
        self._symbols.clear()

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)


class QuotePoller:
    """Refreshes every subscribed symbol on a fixed interval.

    Each cycle takes a snapshot of the registry and fetches every symbol in
    its own task, so one slow or failing symbol never holds up the others.
    The timer does not wait for a cycle to finish: a cycle that outlives the
    interval overlaps the next one, and update events may arrive out of order
    across symbols.

    Results for symbols unsubscribed while their fetch was in flight are
    dropped instead of published.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        fetch: Callable[[str], Awaitable[Quote]],
        publish: Callable[[MarketEvent], None],
        interval: float = 30.0,
    ) -> None:
        self._registry = registry
        self._fetch = fetch
        self._publish = publish
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the timer. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="quote-poller")
        logger.info("Quote poller started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        """Cancel the timer and any fetches still in flight. Safe to call multiple times."""
        tasks = list(self._inflight)
        if self._task and not self._task.done():
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        self._inflight.clear()
        logger.info("Quote poller stopped")

    async def poll_once(self) -> None:
        """Run one cycle and wait for all of its fetches."""
        tasks = self._start_cycle()
        if tasks:
            await asyncio.gather(*tasks)

    # --- Internal ---

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._start_cycle()
            except Exception:
                logger.exception("Quote poll cycle failed to start")

    def _start_cycle(self) -> list[asyncio.Task]:
        symbols = self._registry.snapshot()
        tasks = []
        for symbol in symbols:
            task = asyncio.create_task(self._refresh(symbol), name=f"quote-poll-{symbol}")
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            tasks.append(task)
        logger.debug("Quote poll cycle: %d symbols", len(symbols))
        return tasks

    async def _refresh(self, symbol: str) -> None:
        try:
            quote = await self._fetch(symbol)
            event = MarketEvent(kind="update", symbol=symbol, quote=quote)
        except MarketDataError as e:
            logger.warning("Poll: failed to update %s: %s", symbol, e)
            event = MarketEvent(kind="update", symbol=symbol, error=e)
        except Exception as e:
            logger.exception("Poll: unexpected error updating %s", symbol)
            event = MarketEvent(kind="update", symbol=symbol, error=e)

        if symbol not in self._registry:
            logger.debug("Poll: dropping update for unsubscribed %s", symbol)
            return
        self._publish(event)

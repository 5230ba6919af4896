"""Massive (Polygon.io) API adapter."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

from .exceptions import ProviderTransientError
from .interface import DEFAULT_TIMEOUT, ProviderAdapter
from .models import HistoricalPoint, Quote
from .reference import period_seconds

logger = logging.getLogger(__name__)

# interval -> (multiplier, timespan) for the aggregates endpoint
_AGG_SPANS: dict[str, tuple[int, str]] = {
    "1m": (1, "minute"),
    "5m": (5, "minute"),
    "15m": (15, "minute"),
    "30m": (30, "minute"),
    "60m": (1, "hour"),
    "1h": (1, "hour"),
    "1d": (1, "day"),
    "1wk": (1, "week"),
    "1mo": (1, "month"),
}


class MassiveAdapter(ProviderAdapter):
    """ProviderAdapter backed by the Massive (Polygon.io) REST API.

    Quotes come from the single-ticker snapshot, history from the aggregates
    endpoint. The Massive RESTClient is synchronous, so every call runs in a
    worker thread to keep the event loop free.

    Rate limits:
      - Free tier: 5 req/min, so keep this adapter late in the fallback chain
      - Paid tiers: higher limits
    """

    name = "Massive"

    def __init__(self, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(timeout=timeout)
        self._api_key = api_key
        self._client: Any = None  # Lazy import to avoid hard dependency at import time

    async def start(self) -> None:
        # Lazy import: the massive package is only needed when this adapter is configured.
        from massive import RESTClient

        if self._client is None:
            self._client = RESTClient(api_key=self._api_key)
            logger.info("Massive client ready")

    async def close(self) -> None:
        self._client = None

    async def _fetch_quote(self, symbol: str) -> Quote | None:
        if self._client is None:
            return None
        snap = await self._call(self._fetch_snapshot, symbol)
        if snap is None or snap.last_trade is None:
            return None

        price = float(snap.last_trade.price)
        day = snap.day
        previous_close = float(snap.prev_day.close) if snap.prev_day else price
        return Quote(
            symbol=snap.ticker.upper(),
            price=price,
            change=float(snap.todays_change or 0.0),
            change_percent=float(snap.todays_change_percent or 0.0),
            volume=int(day.volume or 0) if day else 0,
            high=float(day.high or price) if day else price,
            low=float(day.low or price) if day else price,
            open=float(day.open or price) if day else price,
            previous_close=previous_close,
            # Massive trade timestamps are Unix milliseconds
            timestamp=int(snap.last_trade.timestamp),
            source=self.name,
        )

    async def _fetch_historical(
        self, symbol: str, period: str, interval: str
    ) -> list[HistoricalPoint] | None:
        if self._client is None:
            return None
        aggs = await self._call(self._fetch_aggs, symbol, period, interval)
        points = [
            HistoricalPoint(
                date=int(agg.timestamp),
                open=float(agg.open),
                high=float(agg.high),
                low=float(agg.low),
                close=float(agg.close),
                volume=int(agg.volume or 0),
            )
            for agg in aggs or []
            if agg.close is not None
        ]
        points.sort(key=lambda p: p.date)
        return points

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking RESTClient call in a thread.

        API errors (bad key, unknown ticker, 5xx) and urllib3 transport errors
        become ProviderTransientError so the fallback chain moves on.
        """
        from massive.exceptions import AuthError, BadResponse
        from urllib3.exceptions import HTTPError

        try:
            return await asyncio.to_thread(fn, *args)
        except (AuthError, BadResponse, HTTPError) as e:
            raise ProviderTransientError(self.name, f"{type(e).__name__}: {e}") from e

    def _fetch_snapshot(self, symbol: str) -> Any:
        """Synchronous call to the Massive REST API. Runs in a thread."""
        from massive.rest.models import SnapshotMarketType

        return self._client.get_snapshot_ticker(SnapshotMarketType.STOCKS, symbol)

    def _fetch_aggs(self, symbol: str, period: str, interval: str) -> list:
        """Synchronous call to the Massive REST API. Runs in a thread."""
        multiplier, timespan = _AGG_SPANS.get(interval, (1, "day"))
        end = date.today()
        start = end - timedelta(seconds=period_seconds(period))
        return self._client.get_aggs(
            ticker=symbol,
            multiplier=multiplier,
            timespan=timespan,
            from_=start.isoformat(),
            to=end.isoformat(),
        )

"""Yahoo Finance chart API adapter (unofficial, no key required)."""

from __future__ import annotations

import time
from typing import Any

from .http_adapter import HttpProviderAdapter
from .models import HistoricalPoint, Quote, now_ms
from .reference import INTERVALS, period_seconds


class YahooFinanceAdapter(HttpProviderAdapter):
    """Quotes and history from /v8/finance/chart/{symbol}.

    The quote is assembled from the chart's 'meta' block; change and
    change percent are computed against meta.previousClose because the chart
    endpoint does not report them directly.
    """

    name = "Yahoo Finance"
    base_url = "https://query1.finance.yahoo.com"

    async def _chart(self, symbol: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        payload = await self._get_json(f"/v8/finance/chart/{symbol}", params=params)
        results = (payload or {}).get("chart", {}).get("result") or []
        return results[0] if results else None

    async def _fetch_quote(self, symbol: str) -> Quote | None:
        result = await self._chart(symbol)
        if not result:
            return None

        meta = result["meta"]
        price = float(meta["regularMarketPrice"])
        previous_close = float(meta.get("previousClose") or meta["chartPreviousClose"])
        change = price - previous_close
        opens = [o for o in result["indicators"]["quote"][0].get("open") or [] if o is not None]

        return Quote(
            symbol=meta["symbol"].upper(),
            price=price,
            change=change,
            change_percent=change / previous_close * 100 if previous_close else 0.0,
            volume=int(meta.get("regularMarketVolume") or 0),
            high=float(meta.get("regularMarketDayHigh") or price),
            low=float(meta.get("regularMarketDayLow") or price),
            open=float(opens[-1]) if opens else price,
            previous_close=previous_close,
            timestamp=now_ms(),
            source=self.name,
        )

    async def _fetch_historical(
        self, symbol: str, period: str, interval: str
    ) -> list[HistoricalPoint] | None:
        end = int(time.time())
        result = await self._chart(
            symbol,
            params={
                "period1": end - period_seconds(period),
                "period2": end,
                "interval": interval if interval in INTERVALS else "1d",
            },
        )
        if not result:
            return None

        timestamps = result.get("timestamp") or []
        bars = result["indicators"]["quote"][0]
        points = []
        for i, ts in enumerate(timestamps):
            close = bars["close"][i]
            # Yahoo pads halted / partial sessions with nulls
            if close is None:
                continue
            points.append(
                HistoricalPoint(
                    date=ts * 1000,
                    open=float(bars["open"][i] if bars["open"][i] is not None else close),
                    high=float(bars["high"][i] if bars["high"][i] is not None else close),
                    low=float(bars["low"][i] if bars["low"][i] is not None else close),
                    close=float(close),
                    volume=int(bars["volume"][i] or 0),
                )
            )
        return points

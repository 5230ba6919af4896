"""Alpha Vantage REST adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from .exceptions import ProviderTransientError
from .http_adapter import HttpProviderAdapter
from .interface import DEFAULT_TIMEOUT
from .models import HistoricalPoint, Quote
from .reference import PERIOD_SECONDS, period_seconds

# 'compact' returns only the latest 100 bars, about five months of daily data
COMPACT_MAX_SECONDS = PERIOD_SECONDS["3mo"]

_SERIES_FUNCTIONS = {
    "1d": "TIME_SERIES_DAILY",
    "1wk": "TIME_SERIES_WEEKLY",
    "1mo": "TIME_SERIES_MONTHLY",
}


def _date_ms(value: str) -> int:
    """'YYYY-MM-DD' (UTC midnight) -> Unix milliseconds."""
    day = datetime.strptime(value[:10], "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(day.timestamp() * 1000)


class AlphaVantageAdapter(HttpProviderAdapter):
    """Quotes via GLOBAL_QUOTE, history via the TIME_SERIES_* family.

    Alpha Vantage answers rate-limited requests with HTTP 200 and a 'Note' or
    'Information' field instead of data; those count as transient failures.
    """

    name = "Alpha Vantage"
    base_url = "https://www.alphavantage.co"

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout, http_client=http_client)
        self._api_key = api_key

    async def _query(self, params: dict[str, Any]) -> dict[str, Any] | None:
        payload = await self._get_json("/query", params={**params, "apikey": self._api_key})
        if not payload:
            return None
        for notice in ("Note", "Information"):
            if notice in payload:
                raise ProviderTransientError(self.name, str(payload[notice]))
        return payload

    async def _fetch_quote(self, symbol: str) -> Quote | None:
        if not self._api_key:
            return None

        payload = await self._query({"function": "GLOBAL_QUOTE", "symbol": symbol})
        data = payload.get("Global Quote") if payload else None
        if not data:
            return None

        return Quote(
            symbol=data["01. symbol"].upper(),
            price=float(data["05. price"]),
            change=float(data["09. change"]),
            change_percent=float(data["10. change percent"].rstrip("%")),
            volume=int(data["06. volume"]),
            high=float(data["03. high"]),
            low=float(data["04. low"]),
            open=float(data["02. open"]),
            previous_close=float(data["08. previous close"]),
            timestamp=_date_ms(data["07. latest trading day"]),
            source=self.name,
        )

    async def _fetch_historical(
        self, symbol: str, period: str, interval: str
    ) -> list[HistoricalPoint] | None:
        if not self._api_key:
            return None

        payload = await self._query(
            {
                "function": _SERIES_FUNCTIONS.get(interval, "TIME_SERIES_DAILY"),
                "symbol": symbol,
                "outputsize": "compact" if period_seconds(period) <= COMPACT_MAX_SECONDS else "full",
            }
        )
        if not payload:
            return None

        series_key = next((key for key in payload if "Time Series" in key), None)
        series = payload.get(series_key) if series_key else None
        if not series:
            return None

        points = [
            HistoricalPoint(
                date=_date_ms(day),
                open=float(values["1. open"]),
                high=float(values["2. high"]),
                low=float(values["3. low"]),
                close=float(values["4. close"]),
                volume=int(values["5. volume"]),
            )
            for day, values in series.items()
        ]
        points.sort(key=lambda p: p.date)
        return points

"""IEX Cloud quote adapter."""

from __future__ import annotations

import httpx

from .http_adapter import HttpProviderAdapter
from .interface import DEFAULT_TIMEOUT
from .models import Quote, now_ms


class IexCloudAdapter(HttpProviderAdapter):
    """Quotes from /stable/stock/{symbol}/quote. History is not offered."""

    name = "IEX Cloud"
    base_url = "https://cloud.iexapis.com"

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout, http_client=http_client)
        self._api_key = api_key

    async def _fetch_quote(self, symbol: str) -> Quote | None:
        if not self._api_key:
            return None

        data = await self._get_json(f"/stable/stock/{symbol}/quote", params={"token": self._api_key})
        if not data or data.get("latestPrice") is None:
            return None

        price = float(data["latestPrice"])
        return Quote(
            symbol=data["symbol"].upper(),
            price=price,
            change=float(data.get("change") or 0.0),
            # IEX reports changePercent as a fraction
            change_percent=float(data.get("changePercent") or 0.0) * 100,
            volume=int(data.get("latestVolume") or data.get("volume") or 0),
            high=float(data.get("high") or price),
            low=float(data.get("low") or price),
            open=float(data.get("open") or price),
            previous_close=float(data.get("previousClose") or price),
            timestamp=int(data.get("latestUpdate") or now_ms()),
            source=self.name,
        )

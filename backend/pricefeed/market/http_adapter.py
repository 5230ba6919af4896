"""Shared plumbing for providers that speak JSON over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import ProviderTransientError
from .interface import DEFAULT_TIMEOUT, ProviderAdapter

logger = logging.getLogger(__name__)


class HttpProviderAdapter(ProviderAdapter):
    """ProviderAdapter backed by an httpx.AsyncClient.

    A client passed in by the caller is borrowed and never closed here.
    Otherwise one is created lazily and closed by close().
    """

    base_url: str = ""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout)
        self._client = http_client
        self._owns_client = http_client is None

    async def start(self) -> None:
        self._ensure_client()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": "pricefeed/1.0"},
            )
            self._owns_client = True
        return self._client

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET base_url + path and decode JSON.

        Rate limiting, server errors and connection problems raise
        ProviderTransientError. Other 4xx responses (unknown symbol, bad key)
        return None.
        """
        client = self._ensure_client()
        try:
            response = await client.get(f"{self.base_url}{path}", params=params)
        except httpx.TransportError as e:
            raise ProviderTransientError(self.name, f"{type(e).__name__}: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise ProviderTransientError(self.name, f"HTTP {response.status_code}")
        if response.status_code >= 400:
            logger.debug("%s returned HTTP %d for %s", self.name, response.status_code, path)
            return None
        return response.json()

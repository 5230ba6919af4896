"""Environment-driven configuration for the market data service."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .interface import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def _seconds(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %.1fs", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %.1fs", name, raw, default)
        return default
    return value


@dataclass(frozen=True, slots=True)
class MarketDataConfig:
    """Which providers to use and how often to poll.

    Environment variables:
        ALPHA_VANTAGE_API_KEY        enables Alpha Vantage
        IEX_CLOUD_API_KEY            enables IEX Cloud
        MASSIVE_API_KEY              enables Massive (Polygon.io)
        MARKET_DATA_YAHOO            Yahoo Finance on/off (default on)
        MARKET_DATA_SIMULATOR        offline simulator as last resort (default off)
        MARKET_DATA_UPDATE_INTERVAL  poll interval in seconds (default 30)
        MARKET_DATA_TIMEOUT          per-provider-call timeout in seconds (default 10)
    """

    alpha_vantage_key: str = ""
    iex_cloud_key: str = ""
    massive_key: str = ""
    yahoo_enabled: bool = True
    simulator_enabled: bool = False
    update_interval: float = 30.0
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MarketDataConfig:
        env = os.environ if environ is None else environ
        return cls(
            alpha_vantage_key=env.get("ALPHA_VANTAGE_API_KEY", "").strip(),
            iex_cloud_key=env.get("IEX_CLOUD_API_KEY", "").strip(),
            massive_key=env.get("MASSIVE_API_KEY", "").strip(),
            yahoo_enabled=_flag(env, "MARKET_DATA_YAHOO", True),
            simulator_enabled=_flag(env, "MARKET_DATA_SIMULATOR", False),
            update_interval=_seconds(env, "MARKET_DATA_UPDATE_INTERVAL", 30.0),
            timeout=_seconds(env, "MARKET_DATA_TIMEOUT", DEFAULT_TIMEOUT),
        )

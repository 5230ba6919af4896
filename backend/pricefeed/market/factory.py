"""Factory for assembling the provider chain and the service."""

from __future__ import annotations

import logging

from .alpha_vantage import AlphaVantageAdapter
from .config import MarketDataConfig
from .iex_cloud import IexCloudAdapter
from .interface import ProviderAdapter
from .service import MarketDataService
from .yahoo import YahooFinanceAdapter

logger = logging.getLogger(__name__)


def create_adapters(config: MarketDataConfig) -> list[ProviderAdapter]:
    """Build the fallback chain in its fixed priority order.

    Alpha Vantage -> Yahoo Finance -> IEX Cloud -> Massive -> Simulator.
    Keyed providers are included only when their key is set; the simulator
    only when explicitly enabled.
    """
    adapters: list[ProviderAdapter] = []

    if config.alpha_vantage_key:
        adapters.append(AlphaVantageAdapter(api_key=config.alpha_vantage_key, timeout=config.timeout))
    if config.yahoo_enabled:
        adapters.append(YahooFinanceAdapter(timeout=config.timeout))
    if config.iex_cloud_key:
        adapters.append(IexCloudAdapter(api_key=config.iex_cloud_key, timeout=config.timeout))
    if config.massive_key:
        from .massive_client import MassiveAdapter

        adapters.append(MassiveAdapter(api_key=config.massive_key, timeout=config.timeout))
    if config.simulator_enabled:
        from .simulator import SimulatorAdapter

        adapters.append(SimulatorAdapter(timeout=config.timeout))

    if not adapters:
        logger.warning("No market data providers configured; every request will fail")
    return adapters


def create_market_data_service(config: MarketDataConfig | None = None) -> MarketDataService:
    """Create a service from configuration (environment variables by default).

    Returns an unstarted service. Caller must await service.start().
    """
    config = config or MarketDataConfig.from_env()
    adapters = create_adapters(config)
    logger.info("Market data providers: %s", ", ".join(a.name for a in adapters) or "none")
    return MarketDataService(adapters=adapters, update_interval=config.update_interval)

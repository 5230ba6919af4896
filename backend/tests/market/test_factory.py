"""Tests for configuration and the provider chain factory."""

import os
from unittest.mock import patch

from pricefeed.market.alpha_vantage import AlphaVantageAdapter
from pricefeed.market.config import MarketDataConfig
from pricefeed.market.factory import create_adapters, create_market_data_service
from pricefeed.market.iex_cloud import IexCloudAdapter
from pricefeed.market.interface import DEFAULT_TIMEOUT
from pricefeed.market.massive_client import MassiveAdapter
from pricefeed.market.service import MarketDataService
from pricefeed.market.simulator import SimulatorAdapter
from pricefeed.market.yahoo import YahooFinanceAdapter


class TestMarketDataConfig:
    def test_defaults(self):
        config = MarketDataConfig.from_env({})
        assert config.alpha_vantage_key == ""
        assert config.yahoo_enabled is True
        assert config.simulator_enabled is False
        assert config.update_interval == 30.0
        assert config.timeout == DEFAULT_TIMEOUT

    def test_reads_keys_and_flags(self):
        config = MarketDataConfig.from_env(
            {
                "ALPHA_VANTAGE_API_KEY": " av-key ",
                "IEX_CLOUD_API_KEY": "iex-key",
                "MASSIVE_API_KEY": "massive-key",
                "MARKET_DATA_YAHOO": "false",
                "MARKET_DATA_SIMULATOR": "yes",
                "MARKET_DATA_UPDATE_INTERVAL": "5",
                "MARKET_DATA_TIMEOUT": "2.5",
            }
        )
        assert config.alpha_vantage_key == "av-key"
        assert config.iex_cloud_key == "iex-key"
        assert config.massive_key == "massive-key"
        assert config.yahoo_enabled is False
        assert config.simulator_enabled is True
        assert config.update_interval == 5.0
        assert config.timeout == 2.5

    def test_invalid_interval_falls_back(self):
        assert MarketDataConfig.from_env({"MARKET_DATA_UPDATE_INTERVAL": "soon"}).update_interval == 30.0
        assert MarketDataConfig.from_env({"MARKET_DATA_UPDATE_INTERVAL": "-1"}).update_interval == 30.0
        assert MarketDataConfig.from_env({"MARKET_DATA_TIMEOUT": "0"}).timeout == DEFAULT_TIMEOUT

    def test_reads_process_environment(self):
        with patch.dict(os.environ, {"IEX_CLOUD_API_KEY": "from-env"}, clear=True):
            assert MarketDataConfig.from_env().iex_cloud_key == "from-env"


class TestCreateAdapters:
    def test_default_chain_is_yahoo_only(self):
        adapters = create_adapters(MarketDataConfig())
        assert [type(a) for a in adapters] == [YahooFinanceAdapter]

    def test_full_chain_order(self):
        config = MarketDataConfig(
            alpha_vantage_key="av",
            iex_cloud_key="iex",
            massive_key="massive",
            simulator_enabled=True,
        )
        adapters = create_adapters(config)
        assert [type(a) for a in adapters] == [
            AlphaVantageAdapter,
            YahooFinanceAdapter,
            IexCloudAdapter,
            MassiveAdapter,
            SimulatorAdapter,
        ]

    def test_timeout_is_passed_through(self):
        adapters = create_adapters(MarketDataConfig(alpha_vantage_key="av", timeout=3.0))
        assert all(a.timeout == 3.0 for a in adapters)

    def test_whitespace_key_disables_provider(self):
        config = MarketDataConfig.from_env({"MASSIVE_API_KEY": "   ", "MARKET_DATA_YAHOO": "0"})
        assert create_adapters(config) == []

    def test_simulator_only(self):
        adapters = create_adapters(MarketDataConfig(yahoo_enabled=False, simulator_enabled=True))
        assert [a.name for a in adapters] == ["Simulator"]


class TestCreateService:
    def test_builds_unstarted_service(self):
        config = MarketDataConfig(yahoo_enabled=False, simulator_enabled=True, update_interval=7.0)
        service = create_market_data_service(config)

        assert isinstance(service, MarketDataService)
        assert [a.name for a in service.adapters] == ["Simulator"]
        assert service.poller.interval == 7.0
        assert not service.poller.running

    def test_uses_environment_by_default(self):
        with patch.dict(os.environ, {"MARKET_DATA_SIMULATOR": "1", "MARKET_DATA_YAHOO": "off"}, clear=True):
            service = create_market_data_service()
        assert [a.name for a in service.adapters] == ["Simulator"]

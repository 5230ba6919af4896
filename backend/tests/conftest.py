"""Pytest configuration and fixtures."""

import asyncio
import logging

import pytest


@pytest.fixture
def event_loop_policy():
    """Use the default event loop policy for all async tests."""
    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture(autouse=True)
def _pricefeed_debug_logs(caplog):
    """Capture pricefeed debug logging so failures show the provider chain."""
    caplog.set_level(logging.DEBUG, logger="pricefeed")

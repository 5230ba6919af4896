"""pricefeed: market data aggregation and analytics."""

__version__ = "1.0.0"

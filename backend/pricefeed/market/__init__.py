"""Market data subsystem for pricefeed.

Public API:
    Quote, HistoricalPoint  - Immutable normalized market data
    MarketDataService       - Quotes, history, analytics, subscriptions, events
    ProviderAdapter         - Abstract interface for data providers
    FallbackResolver        - Ordered provider chain
    TTLCache                - Time-bounded in-memory cache
    NoDataAvailable         - Raised when every provider comes back empty
    MarketDataConfig        - Environment-driven configuration
    create_market_data_service - Factory that builds the provider chain
    create_stream_router    - FastAPI router factory for the SSE endpoint
"""

from .analysis import SymbolAnalysis
from .cache import TTLCache
from .config import MarketDataConfig
from .exceptions import MarketDataError, NoDataAvailable, ProviderTransientError
from .factory import create_market_data_service
from .interface import ProviderAdapter
from .models import HistoricalPoint, MarketEvent, Quote, SectorPerformance
from .resolver import FallbackResolver
from .service import MarketDataService
from .stream import create_stream_router

__all__ = [
    "Quote",
    "HistoricalPoint",
    "MarketEvent",
    "SectorPerformance",
    "SymbolAnalysis",
    "MarketDataService",
    "ProviderAdapter",
    "FallbackResolver",
    "TTLCache",
    "MarketDataConfig",
    "MarketDataError",
    "NoDataAvailable",
    "ProviderTransientError",
    "create_market_data_service",
    "create_stream_router",
]

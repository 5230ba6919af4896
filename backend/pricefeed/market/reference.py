"""Fixed reference tables: benchmark symbols, sector ETFs and period lengths."""

# Broad-market ETFs reported by get_market_indices()
MARKET_INDICES: tuple[str, ...] = ("SPY", "QQQ", "DIA", "IWM", "VTI")

# Sector name -> SPDR sector ETF, reported by get_sector_performance()
SECTOR_ETFS: dict[str, str] = {
    "Technology": "XLK",
    "Healthcare": "XLV",
    "Financial": "XLF",
    "Consumer Discretionary": "XLY",
    "Communication": "XLC",
    "Industrial": "XLI",
    "Consumer Staples": "XLP",
    "Energy": "XLE",
    "Utilities": "XLU",
    "Real Estate": "XLRE",
    "Materials": "XLB",
}

# History lookback windows in seconds
PERIOD_SECONDS: dict[str, int] = {
    "1d": 86_400,
    "5d": 432_000,
    "1mo": 2_592_000,
    "3mo": 7_776_000,
    "6mo": 15_552_000,
    "1y": 31_536_000,
    "2y": 63_072_000,
    "5y": 157_680_000,
    "10y": 315_360_000,
}

DEFAULT_PERIOD_SECONDS = PERIOD_SECONDS["1y"]

# Bar sizes understood by the chart endpoints
INTERVALS: frozenset[str] = frozenset(
    {"1m", "2m", "5m", "15m", "30m", "60m", "90m", "1h", "1d", "5d", "1wk", "1mo", "3mo"}
)


def period_seconds(period: str) -> int:
    """Length of a lookback period in seconds. Unknown periods mean one year."""
    return PERIOD_SECONDS.get(period, DEFAULT_PERIOD_SECONDS)

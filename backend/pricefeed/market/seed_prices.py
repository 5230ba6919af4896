"""Seed prices and per-symbol parameters for the offline simulator."""

# Realistic starting prices for commonly watched symbols
SEED_PRICES: dict[str, float] = {
    "AAPL": 190.00,
    "GOOGL": 175.00,
    "MSFT": 420.00,
    "AMZN": 185.00,
    "TSLA": 250.00,
    "NVDA": 800.00,
    "META": 500.00,
    "JPM": 195.00,
    "V": 280.00,
    "NFLX": 600.00,
    # Benchmarks
    "SPY": 520.00,
    "QQQ": 440.00,
    "DIA": 390.00,
    "IWM": 205.00,
    "VTI": 255.00,
    # Sector ETFs
    "XLK": 210.00,
    "XLV": 145.00,
    "XLF": 41.00,
    "XLY": 180.00,
    "XLC": 80.00,
    "XLI": 125.00,
    "XLP": 77.00,
    "XLE": 92.00,
    "XLU": 68.00,
    "XLRE": 39.00,
    "XLB": 90.00,
}

# Per-symbol GBM parameters
# sigma: annualized volatility (higher = more price movement)
# mu: annualized drift / expected return
SYMBOL_PARAMS: dict[str, dict[str, float]] = {
    "TSLA": {"sigma": 0.50, "mu": 0.03},  # High volatility
    "NVDA": {"sigma": 0.40, "mu": 0.08},  # High volatility, strong drift
    "JPM": {"sigma": 0.18, "mu": 0.04},
    "V": {"sigma": 0.17, "mu": 0.04},
    "SPY": {"sigma": 0.15, "mu": 0.07},
    "DIA": {"sigma": 0.14, "mu": 0.06},
    "VTI": {"sigma": 0.15, "mu": 0.07},
    "XLU": {"sigma": 0.14, "mu": 0.04},  # Low volatility (utilities)
    "XLP": {"sigma": 0.12, "mu": 0.04},  # Low volatility (staples)
}

# Default parameters for symbols not listed above
DEFAULT_PARAMS: dict[str, float] = {"sigma": 0.25, "mu": 0.05}

# Seed price range for unknown symbols
UNKNOWN_PRICE_RANGE: tuple[float, float] = (50.0, 300.0)

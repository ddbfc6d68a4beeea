"""Constants, asset universe and habit presets."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.environ.get(
    "VICEVAULT_DB_PATH",
    os.path.join(os.path.dirname(__file__), "data", "vicevault.db"),
)

DEFAULT_SYMBOL = os.environ.get("VICEVAULT_DEFAULT_SYMBOL", "SPY")

# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

HISTORY_YEARS = int(os.environ.get("VICEVAULT_HISTORY_YEARS", "5"))
PRICE_CACHE_TTL_HOURS = float(os.environ.get("VICEVAULT_PRICE_CACHE_TTL_HOURS", "24"))

# Last close older than this is considered stale
STALE_DATA_DAYS = 7

SUPPORTED_ASSETS = {
    # Indices
    "SPY": {"name": "S&P 500", "category": "Indices"},
    "QQQ": {"name": "Nasdaq 100", "category": "Indices"},
    # Crypto
    "BTC-USD": {"name": "Bitcoin", "category": "Crypto"},
    "ETH-USD": {"name": "Ethereum", "category": "Crypto"},
    # High growth
    "AAPL": {"name": "Apple", "category": "High Growth"},
    "TSLA": {"name": "Tesla", "category": "High Growth"},
    "NVDA": {"name": "NVIDIA", "category": "High Growth"},
    # Safe
    "SHV": {"name": "US Treasury Bills", "category": "Safe"},
}

# ---------------------------------------------------------------------------
# Cadence
# ---------------------------------------------------------------------------

# Occurrences per year
CADENCE_MULTIPLIERS = {
    "daily": 365,
    "weekly": 52,
    "biweekly": 26,
    "monthly": 12,
}

CADENCE_LABELS = {
    "daily": "Daily",
    "weekly": "Weekly",
    "biweekly": "Bi-Weekly",
    "monthly": "Monthly",
}

VICE_PRESETS = [
    {"name": "Cigarettes", "amount": 15.0, "cadence": "daily"},
    {"name": "Alcohol", "amount": 50.0, "cadence": "weekly"},
    {"name": "Coffee", "amount": 7.0, "cadence": "daily"},
    {"name": "Fast Food", "amount": 15.0, "cadence": "weekly"},
    {"name": "Gambling", "amount": 100.0, "cadence": "weekly"},
    {"name": "Shopping", "amount": 150.0, "cadence": "monthly"},
    {"name": "Subscriptions", "amount": 50.0, "cadence": "monthly"},
    {"name": "Cannabis", "amount": 60.0, "cadence": "weekly"},
]

# ---------------------------------------------------------------------------
# Demo mode (new users see a one-year "what if" projection)
# ---------------------------------------------------------------------------

DEMO_MAX_TRACKED_DAYS = 30
DEMO_MAX_CLEAN_DAYS = 5
DEMO_LOOKBACK_YEARS = 1

# ---------------------------------------------------------------------------
# Statement parsing
# ---------------------------------------------------------------------------

# Anything above this is treated as OCR / extraction garbage
MAX_TRANSACTION_AMOUNT = 100_000

# Two-digit years above the pivot land in the 1900s
TWO_DIGIT_YEAR_PIVOT = 50

MIN_DESCRIPTION_LENGTH = 3

# Fuzzy dedup key uses this many alphanumeric description chars
DEDUP_DESCRIPTION_CHARS = 20

# ---------------------------------------------------------------------------
# Cash flow
# ---------------------------------------------------------------------------

STRANGULATION_WARNING_PCT = 25.0
STRANGULATION_CRITICAL_PCT = 50.0


def cadence_multiplier(cadence: str) -> int:
    """Return yearly occurrences for a cadence value."""
    key = str(getattr(cadence, "value", cadence)).lower().strip()
    if key not in CADENCE_MULTIPLIERS:
        raise ValueError(f"Unknown cadence: {cadence!r}")
    return CADENCE_MULTIPLIERS[key]


def validate_symbol(symbol: str) -> str:
    """Normalize a ticker and check it against the supported asset list."""
    sym = str(symbol or "").upper().strip()
    if sym not in SUPPORTED_ASSETS:
        supported = ", ".join(SUPPORTED_ASSETS)
        raise ValueError(f"Invalid symbol {symbol!r}. Supported: {supported}")
    return sym

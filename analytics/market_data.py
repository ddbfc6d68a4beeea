"""Daily close history via yfinance, with SQLite caching and synthetic fallback."""

from __future__ import annotations

import logging
import math
import time
from datetime import date, timedelta
from typing import Optional

import pandas as pd
import yfinance as yf

from analytics.fallback_data import get_fallback_data
from config import HISTORY_YEARS, PRICE_CACHE_TTL_HOURS, STALE_DATA_DAYS, validate_symbol
from db import cache_prices, get_cached_prices
from models import PricePoint

logger = logging.getLogger(__name__)


def fetch_closes(symbol: str, years: int = HISTORY_YEARS) -> pd.DataFrame:
    """Fetch daily Close data via yfinance.

    Returns DataFrame with a tz-naive DatetimeIndex and a Close column.
    Returns empty DataFrame on failure.
    """
    try:
        ticker = yf.Ticker(symbol)
        hist = ticker.history(period=f"{years}y", interval="1d")
        if hist is None or hist.empty:
            return pd.DataFrame()
        if getattr(hist.index, "tz", None) is not None:
            hist.index = hist.index.tz_localize(None)
        return hist[["Close"]].copy()
    except Exception:
        logger.warning("%s: price download failed", symbol, exc_info=True)
        return pd.DataFrame()


def frame_to_price_points(hist: pd.DataFrame) -> list[PricePoint]:
    """Convert a Close frame to ascending PricePoints, dropping NaN / non-positive closes."""
    if hist.empty or "Close" not in hist.columns:
        return []

    points = {}
    for ts, close in hist["Close"].sort_index().items():
        close = float(close)
        if math.isnan(close) or close <= 0:
            continue
        points[pd.Timestamp(ts).date()] = close  # last row wins on duplicate dates
    return [PricePoint(date=d, close=c) for d, c in sorted(points.items())]


def fetch_history(symbol: str, years: int = HISTORY_YEARS, today: Optional[date] = None) -> tuple[list[PricePoint], bool]:
    """Download ``years`` of daily closes for a supported symbol.

    Returns (prices, is_fallback). Any transport failure or empty response
    falls back to the bundled synthetic series, so callers never see a
    network error. Raises ValueError for unsupported symbols.
    """
    sym = validate_symbol(symbol)
    prices = frame_to_price_points(fetch_closes(sym, years))
    if prices:
        logger.info("%s: fetched %d daily closes", sym, len(prices))
        return prices, False

    fallback = get_fallback_data(sym, today=today)
    logger.warning("%s: market data unavailable, using fallback (%d points)", sym, len(fallback))
    return fallback, True


def is_data_stale(prices: list[PricePoint], today: Optional[date] = None) -> bool:
    """True when there is no data or the last close is more than a week old."""
    if not prices:
        return True
    today = today or date.today()
    return (today - prices[-1].date) > timedelta(days=STALE_DATA_DAYS)


def load_price_history(symbol: str, now: Optional[float] = None, ttl_hours: float = PRICE_CACHE_TTL_HOURS) -> list[PricePoint]:
    """Cached price history: reuse entries younger than the TTL, otherwise refetch.

    Only real market data is written to the cache; fallback series are not.
    """
    sym = validate_symbol(symbol)
    now = now if now is not None else time.time()

    cached = get_cached_prices(sym)
    if cached is not None:
        prices, fetched_at = cached
        if prices and now - fetched_at < ttl_hours * 3600:
            logger.debug("%s: using cached history (%d points)", sym, len(prices))
            return prices

    prices, is_fallback = fetch_history(sym)
    if prices and not is_fallback:
        cache_prices(sym, prices, fetched_at=now)
    elif cached is not None and cached[0]:
        # Keep serving the last real download rather than synthetic data
        logger.info("%s: serving expired cache instead of fallback", sym)
        return cached[0]
    return prices

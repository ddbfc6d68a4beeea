"""Synthetic price history used when the market data feed is unavailable.

Seeded so the same symbol and end date always produce the same series.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from analytics.scheduler import years_before
from config import HISTORY_YEARS
from models import PricePoint


@dataclass(frozen=True)
class _WalkParams:
    seed: int
    start_price: float
    drift_center: float  # daily return = (rand - drift_center) * volatility
    volatility: float
    floor: float
    ceiling: float


FALLBACK_PARAMS = {
    "SPY": _WalkParams(seed=42, start_price=380.0, drift_center=0.47, volatility=0.018, floor=280.0, ceiling=620.0),
    "QQQ": _WalkParams(seed=789, start_price=200.0, drift_center=0.46, volatility=0.022, floor=150.0, ceiling=550.0),
    "BTC-USD": _WalkParams(
        seed=123, start_price=10_000.0, drift_center=0.45, volatility=0.04, floor=5_000.0, ceiling=100_000.0,
    ),
}


def _seeded_random(seed: int):
    state = seed

    def _next() -> float:
        nonlocal state
        state = (state * 1103515245 + 12345) & 0x7FFFFFFF
        return state / 0x7FFFFFFF

    return _next


def generate_random_walk(params: _WalkParams, end: date, years: int = HISTORY_YEARS) -> list[PricePoint]:
    """Weekday-only random walk with an upward bias, clamped to a plausible band."""
    rand = _seeded_random(params.seed)
    price = params.start_price
    current = years_before(end, years)
    data = []

    while current <= end:
        if current.weekday() < 5:
            price *= 1 + (rand() - params.drift_center) * params.volatility
            price = max(params.floor, min(params.ceiling, price))
            data.append(PricePoint(date=current, close=round(price, 2)))
        current += timedelta(days=1)

    return data


def get_fallback_data(symbol: str, today: Optional[date] = None) -> list[PricePoint]:
    """Fallback series for a symbol, or an empty list if none is bundled."""
    params = FALLBACK_PARAMS.get(str(symbol).upper().strip())
    if params is None:
        return []
    return generate_random_walk(params, today or date.today())


def has_fallback(symbol: str) -> bool:
    return str(symbol).upper().strip() in FALLBACK_PARAMS

"""SQLite-backed settings store, clean-day log and price cache."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import time
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Optional

from config import DB_PATH
from models import PricePoint

logger = logging.getLogger(__name__)

# In-process listeners: {key: [callback(key, value)]}
_subscribers: dict[str, list[Callable[[str, Any], None]]] = defaultdict(list)


def get_connection() -> sqlite3.Connection:
    folder = os.path.dirname(DB_PATH)
    if folder:
        os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db():
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db():
    """Create all tables if they don't exist."""
    with get_db() as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS clean_days (
                day TEXT PRIMARY KEY,
                logged_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS price_cache (
                symbol TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                fetched_at REAL NOT NULL
            );
        """)


# ---------------------------------------------------------------------------
# Settings (flat JSON key-value)
# ---------------------------------------------------------------------------

def get_setting(key: str, default: Any = None) -> Any:
    with get_db() as conn:
        row = conn.execute("SELECT value FROM settings WHERE key=?", (key,)).fetchone()
    if row is None:
        return default
    return json.loads(row["value"])


def set_setting(key: str, value: Any):
    """Persist a JSON-serializable value and notify subscribers of ``key``."""
    payload = json.dumps(value)
    with get_db() as conn:
        conn.execute(
            """INSERT INTO settings (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
               ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
            (key, payload),
        )
    for callback in list(_subscribers.get(key, [])):
        try:
            callback(key, value)
        except Exception:
            logger.exception("Settings subscriber failed for %s", key)


def get_settings() -> dict[str, Any]:
    """Snapshot of every stored setting."""
    with get_db() as conn:
        rows = conn.execute("SELECT key, value FROM settings").fetchall()
    return {r["key"]: json.loads(r["value"]) for r in rows}


def subscribe(key: str, callback: Callable[[str, Any], None]) -> Callable[[], None]:
    """Register ``callback(key, value)`` for changes to ``key``. Returns an unsubscribe function."""
    _subscribers[key].append(callback)

    def _unsubscribe():
        if callback in _subscribers.get(key, []):
            _subscribers[key].remove(callback)

    return _unsubscribe


# ---------------------------------------------------------------------------
# Clean days
# ---------------------------------------------------------------------------

def log_clean_day(day: Optional[date] = None) -> bool:
    """Record a clean day (today by default). Returns False if already logged.

    The first clean day also becomes the tracking start date when none is set.
    """
    day = day or date.today()
    with get_db() as conn:
        cur = conn.execute("INSERT OR IGNORE INTO clean_days (day) VALUES (?)", (day.isoformat(),))
        added = cur.rowcount > 0
    if added and not get_setting("start_date"):
        set_setting("start_date", day.isoformat())
    return added


def remove_clean_day(day: date) -> bool:
    with get_db() as conn:
        cur = conn.execute("DELETE FROM clean_days WHERE day=?", (day.isoformat(),))
        return cur.rowcount > 0


def get_clean_days() -> list[date]:
    with get_db() as conn:
        rows = conn.execute("SELECT day FROM clean_days ORDER BY day").fetchall()
    return [date.fromisoformat(r["day"]) for r in rows]


# ---------------------------------------------------------------------------
# Price cache
# ---------------------------------------------------------------------------

def cache_prices(symbol: str, prices: list[PricePoint], fetched_at: Optional[float] = None):
    payload = json.dumps([[p.date.isoformat(), p.close] for p in prices])
    with get_db() as conn:
        conn.execute(
            """INSERT INTO price_cache (symbol, data, fetched_at) VALUES (?, ?, ?)
               ON CONFLICT(symbol) DO UPDATE SET data=excluded.data, fetched_at=excluded.fetched_at""",
            (symbol, payload, fetched_at if fetched_at is not None else time.time()),
        )


def get_cached_prices(symbol: str) -> Optional[tuple[list[PricePoint], float]]:
    """Return (prices, fetched_at epoch seconds) or None if nothing is cached."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT data, fetched_at FROM price_cache WHERE symbol=?", (symbol,),
        ).fetchone()
    if row is None:
        return None
    prices = [PricePoint(date=date.fromisoformat(d), close=float(c)) for d, c in json.loads(row["data"])]
    return prices, float(row["fetched_at"])

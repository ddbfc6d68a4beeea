"""Common text normalization for bank statement parsing."""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Optional

from config import DEDUP_DESCRIPTION_CHARS, MAX_TRANSACTION_AMOUNT, TWO_DIGIT_YEAR_PIVOT

_MONTH_DAY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})$")
_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")
_DASH_DATE_RE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def normalize_line_endings(text: str) -> tuple[str, list[int]]:
    """Convert CRLF / CR to LF and map each normalized position back to ``text``.

    ``offsets[i]`` is where normalized character ``i`` starts in ``text``. The
    list has one extra entry, ``len(text)``, so half-open spans map directly.
    """
    chars = []
    offsets = []
    i = 0
    while i < len(text):
        offsets.append(i)
        if text[i] == "\r":
            chars.append("\n")
            i += 2 if text.startswith("\n", i + 1) else 1
        else:
            chars.append(text[i])
            i += 1
    offsets.append(len(text))
    return "".join(chars), offsets


def _expand_year(year: str) -> int:
    y = int(year)
    if len(year) == 2:
        return 1900 + y if y > TWO_DIGIT_YEAR_PIVOT else 2000 + y
    return y


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_date(s: str, reference_year: Optional[int] = None) -> Optional[date]:
    """Parse statement dates like '01/15', '1/15/24', '01/15/2024', '01-15-2024'.

    Year-less dates take ``reference_year`` (default: the current year).
    Returns None for anything that is not a real calendar date.
    """
    s = str(s or "").strip().strip('"').strip()
    if not s:
        return None

    m = _MONTH_DAY_RE.match(s)
    if m:
        year = reference_year if reference_year is not None else date.today().year
        return _safe_date(year, int(m.group(1)), int(m.group(2)))

    m = _SLASH_DATE_RE.match(s)
    if m:
        return _safe_date(_expand_year(m.group(3)), int(m.group(1)), int(m.group(2)))

    m = _DASH_DATE_RE.match(s)
    if m:
        return _safe_date(int(m.group(3)), int(m.group(1)), int(m.group(2)))

    m = _ISO_DATE_RE.match(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    return None


def parse_amount(s: str) -> Optional[float]:
    """Parse '-$1,234.56' / '(5.75)' style strings to a positive amount.

    Returns None when the value is not a positive finite number within the
    sanity bound.
    """
    cleaned = re.sub(r"[$,\s\"()]", "", str(s or ""))
    if not cleaned:
        return None
    try:
        value = abs(float(cleaned))
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0 or value > MAX_TRANSACTION_AMOUNT:
        return None
    return value


def clean_description(desc: str) -> str:
    """Collapse whitespace and strip store numbers, card numbers and trailing digits."""
    out = re.sub(r"\s+", " ", str(desc or ""))
    out = re.sub(r"\s*#\d+\s*", " ", out)           # store numbers
    out = re.sub(r"CARD \d+", "", out, flags=re.IGNORECASE)
    out = re.sub(r"\s*\d{4,}$", "", out.strip())      # trailing card / reference digits
    out = re.sub(r"\s{2,}", " ", out)
    return out.strip()


def looks_like_header(desc: str) -> bool:
    return bool(re.match(r"^(date|description|amount|balance|transaction)", desc, re.IGNORECASE))


def dedup_key(txn_date: date, description: str, amount: float) -> tuple[str, str, float]:
    """Fuzzy identity: date + leading alphanumeric description + amount in cents."""
    alnum = re.sub(r"[^a-z0-9]", "", description.lower())
    return (txn_date.isoformat(), alnum[:DEDUP_DESCRIPTION_CHARS], round(amount, 2))


def dedupe_and_sort(transactions: list) -> list:
    """Drop fuzzy duplicates (first occurrence wins), then stable-sort by date."""
    seen: set = set()
    unique = []
    for t in transactions:
        key = dedup_key(t.date, t.description, t.amount)
        if key in seen:
            continue
        seen.add(key)
        unique.append(t)
    return sorted(unique, key=lambda t: t.date)

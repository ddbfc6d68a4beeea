"""Parser for pasted bank statement text (Chase, Wells Fargo, Bank of America, generic).

Pattern families run in priority order over the whole text. A match whose
character range overlaps one already claimed by an earlier pattern is
dropped, so a loose generic pattern can never re-capture a line an
issuer-specific pattern already extracted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from config import MIN_DESCRIPTION_LENGTH
from models import ParsedTransaction
from parsers.base import (
    clean_description,
    dedupe_and_sort,
    looks_like_header,
    normalize_date,
    normalize_line_endings,
    parse_amount,
)

logger = logging.getLogger(__name__)

# A date must start at a token boundary, never mid-way through "01/15/2024"
_D = r"(?<![\d/\-])"


@dataclass(frozen=True)
class StatementPattern:
    """One extraction rule. Every regex exposes ``date``, ``desc`` and ``amount`` groups."""
    family: str
    regex: re.Pattern


def _p(family: str, pattern: str, flags: int = 0) -> StatementPattern:
    return StatementPattern(family=family, regex=re.compile(pattern, flags))


# Example: "01/15/2024  STARBUCKS #12345 SEATTLE WA  -$5.75"
# Example: "01/15/2024  PURCHASE AUTHORIZED ON 01/14 STARBUCKS CARD 1234  $5.75"
CHASE_PATTERNS = [
    _p("chase", _D + r"(?P<date>\d{2}/\d{2}/\d{4})[ \t]+(?P<desc>.+?)[ \t]+(?P<amount>-?\$[\d,]+\.\d{2})"),
    _p(
        "chase",
        _D + r"(?P<date>\d{2}/\d{2}/\d{4})[ \t]+(?:PURCHASE AUTHORIZED ON \d{2}/\d{2}[ \t]+)?"
        r"(?P<desc>.+?)[ \t]+(?:CARD \d+[ \t]+)?\$?(?P<amount>[\d,]+\.\d{2})",
        re.IGNORECASE,
    ),
]

# Example: "01/15  DEBIT CARD PURCHASE STARBUCKS #12345  5.75"
# Example: "1/15  POS DEBIT - VISA CHECK CARD 1234 - STARBUCKS  $5.75"
WELLS_FARGO_PATTERNS = [
    _p(
        "wells_fargo",
        _D + r"(?P<date>\d{1,2}/\d{1,2})[ \t]+(?:DEBIT CARD PURCHASE[ \t]+)?"
        r"(?P<desc>.+?)[ \t]+(?P<amount>[\d,]+\.\d{2})[ \t]*$",
        re.MULTILINE,
    ),
    _p(
        "wells_fargo",
        _D + r"(?P<date>\d{1,2}/\d{1,2})[ \t]+(?:POS DEBIT[ \t]+-[ \t]+VISA CHECK CARD \d+[ \t]+-[ \t]+)?"
        r"(?P<desc>.+?)[ \t]+\$?(?P<amount>[\d,]+\.\d{2})",
        re.IGNORECASE,
    ),
    _p("wells_fargo", _D + r"(?P<date>\d{1,2}/\d{1,2}/\d{2,4})[ \t]+(?P<desc>.+?)[ \t]+(?P<amount>[\d,]+\.\d{2})"),
]

# Example: "01/15/24  Starbucks Coffee  $5.75  Debit"
# Example: "01/15/2024  CHECKCARD 0115 STARBUCKS #12345  5.75"
BOA_PATTERNS = [
    _p(
        "bank_of_america",
        _D + r"(?P<date>\d{2}/\d{2}/\d{2,4})[ \t]+(?P<desc>.+?)[ \t]+\$?(?P<amount>[\d,]+\.\d{2})"
        r"(?:[ \t]+(?:Debit|Credit))?",
        re.IGNORECASE,
    ),
    _p(
        "bank_of_america",
        _D + r"(?P<date>\d{2}/\d{2}/\d{2,4})[ \t]+(?:CHECKCARD \d{4}[ \t]+)?"
        r"(?P<desc>.+?)[ \t]+(?P<amount>[\d,]+\.\d{2})",
        re.IGNORECASE,
    ),
]

GENERIC_PATTERNS = [
    # Date, description, amount with optional sign / dollar sign
    _p(
        "generic",
        _D + r"(?P<date>\d{1,2}[-/]\d{1,2}(?:[-/]\d{2,4})?)[ \t]+(?P<desc>.{3,50}?)[ \t]+"
        r"-?\$?(?P<amount>[\d,]+\.\d{2})",
    ),
    # Tab separated
    _p(
        "generic",
        _D + r"(?P<date>\d{1,2}[-/]\d{1,2}(?:[-/]\d{2,4})?)\t+(?P<desc>.+?)\t+-?\$?(?P<amount>[\d,]+\.\d{2})",
    ),
    # Comma separated rows pasted from an exported CSV
    _p(
        "generic",
        _D + r"(?P<date>\d{1,2}[-/]\d{1,2}[-/]\d{2,4}),[ \t]*\"?(?P<desc>[^\",\n]+)\"?,[ \t]*"
        r"\"?-?\$?(?P<amount>[\d,]+\.\d{2})",
    ),
]

# Priority order: issuer-specific first, generic fallback last
STATEMENT_PATTERNS: list[StatementPattern] = (
    CHASE_PATTERNS + WELLS_FARGO_PATTERNS + BOA_PATTERNS + GENERIC_PATTERNS
)

# Lines that carry an amount but are not spending
NON_TRANSACTION_RE = re.compile(
    r"\b(?:beginning|ending|opening|closing|available|current|daily|previous|new)\s+balance\b"
    r"|\bbalance\s+(?:forward|brought)\b"
    # Summary totals only; merchants such as "TOTAL WINE" are spending
    r"|\b(?:sub)?totals?\b(?=\s*(?::|-?\$?[\d,]+\.\d{2}"
    r"|(?:purchases|fees|charges|debits|credits|interest|payments|for|due|amount|balance|spent|this)\b))"
    r"|\btransfer\b|\bxfer\b"
    r"|\bpayment\s*-?\s*thank\s+you\b"
    r"|\bstatement\s+(?:period|date)\b"
    r"|\bminimum\s+payment\b"
    r"|\binterest\s+(?:charged|earned|paid)\b"
    r"|\bdirect\s+dep(?:osit)?\b|\bdeposit\b|\bpayroll\b",
    re.IGNORECASE,
)

# Issuer boilerplate that precedes the merchant name
ISSUER_PREFIX_RE = re.compile(
    r"^(?:PURCHASE AUTHORIZED ON \d{1,2}/\d{1,2}\s+"
    r"|DEBIT CARD PURCHASE\s+"
    r"|POS DEBIT\s+-\s+VISA CHECK CARD \d+\s+-\s+"
    r"|CHECKCARD \d{4}\s+)",
    re.IGNORECASE,
)


def _overlaps(span: tuple[int, int], claimed: list[tuple[int, int]]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)


def _is_non_transaction(raw: str) -> bool:
    return bool(NON_TRANSACTION_RE.search(raw))


def _build_transaction(
    match: re.Match, reference_year: Optional[int], source: str, offsets: list[int],
) -> Optional[ParsedTransaction]:
    """Validate one candidate. Returns None for anything that should be skipped.

    The span is reported against ``source``, the text before line-ending
    normalization.
    """
    raw = match.group(0)
    if _is_non_transaction(raw):
        return None

    description = clean_description(ISSUER_PREFIX_RE.sub("", match.group("desc").strip()))
    if len(description) < MIN_DESCRIPTION_LENGTH or looks_like_header(description):
        return None

    amount = parse_amount(match.group("amount"))
    if amount is None:
        return None

    txn_date = normalize_date(match.group("date"), reference_year=reference_year)
    if txn_date is None:
        return None

    start, end = offsets[match.start()], offsets[match.end()]
    return ParsedTransaction(
        date=txn_date,
        description=description,
        amount=amount,
        span=(start, end),
        raw_match=source[start:end],
    )


def parse_statement_text(text: str, reference_year: Optional[int] = None) -> list[ParsedTransaction]:
    """Extract debit transactions from free-form statement text.

    ``reference_year`` fills in year-less dates such as '01/15'; it defaults
    to the current year. Never raises for malformed input.
    """
    if not text:
        return []

    source = str(text)
    normalized, offsets = normalize_line_endings(source)
    claimed: list[tuple[int, int]] = []
    transactions: list[ParsedTransaction] = []

    for pattern in STATEMENT_PATTERNS:
        for match in pattern.regex.finditer(normalized):
            if _overlaps(match.span(), claimed):
                continue
            txn = _build_transaction(match, reference_year, source, offsets)
            if txn is None:
                continue
            claimed.append(match.span())
            transactions.append(txn)

    result = dedupe_and_sort(transactions)
    logger.debug("Parsed %d transactions (%d candidates)", len(result), len(transactions))
    return result

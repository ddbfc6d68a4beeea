"""Parser for CSV exports downloaded from online banking."""

from __future__ import annotations

import io
import logging
from typing import Optional

import pandas as pd

from models import ParsedTransaction
from parsers.base import dedupe_and_sort, normalize_date, normalize_line_endings, parse_amount

logger = logging.getLogger(__name__)


def _find_column(headers: list[str], exact: tuple[str, ...], partial: tuple[str, ...]) -> Optional[int]:
    for i, h in enumerate(headers):
        if h in exact or any(p in h for p in partial):
            return i
    return None


def _detect_columns(headers: list[str]) -> Optional[tuple[int, int, int]]:
    """Return (date, description, amount) column positions, or None."""
    date_idx = _find_column(headers, ("posted",), ("date",))
    desc_idx = _find_column(headers, ("payee",), ("description", "merchant", "name"))
    amount_idx = _find_column(headers, ("withdrawal",), ("amount", "debit"))
    if date_idx is None or desc_idx is None or amount_idx is None:
        return None
    return date_idx, desc_idx, amount_idx


def _read_rows(text: str, header: Optional[int]) -> pd.DataFrame:
    """Read every record as one row.

    ``index_col=False`` keeps pandas from turning extra trailing fields (a
    trailing comma, a running-balance column) into an index; those fields are
    dropped instead of shifting the row.
    """
    return pd.read_csv(
        io.StringIO(text),
        header=header,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
        skipinitialspace=True,
        engine="python",
    )


def _record_spans(text: str) -> list[tuple[int, int]]:
    """(start, end) of each CSV record. Newlines inside quoted fields do not end a record."""
    spans = []
    start = 0
    in_quotes = False
    for i, ch in enumerate(text):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "\n" and not in_quotes:
            spans.append((start, i))
            start = i + 1
    spans.append((start, len(text)))
    return spans


def _cell(row: tuple, idx: int) -> str:
    value = row[idx] if idx < len(row) else ""
    return value.strip() if isinstance(value, str) else ""


def parse_csv_text(text: str, reference_year: Optional[int] = None) -> list[ParsedTransaction]:
    """Extract transactions from CSV text with a header row.

    Columns are found by header name (date / description / amount). When the
    header cannot be identified but there are at least three columns, rows
    are read positionally as Date, Description, Amount. Rows with a bad
    date, empty description or non-positive amount are skipped.

    Each transaction's span covers its full CSV record in ``text``.
    """
    source = str(text or "")
    normalized, offsets = normalize_line_endings(source)
    lead = len(normalized) - len(normalized.lstrip())
    normalized = normalized.strip()
    if not normalized:
        return []

    try:
        df = _read_rows(normalized, header=0)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError):
        logger.warning("Could not read CSV input")
        return []

    headers = [str(c).lower().strip() for c in df.columns]
    columns = _detect_columns(headers)
    first_record = 1

    if columns is None:
        if len(headers) < 3:
            logger.warning("CSV has no recognizable date/description/amount columns")
            return []
        logger.info("CSV header not recognized, falling back to positional columns")
        df = _read_rows(normalized, header=None)
        columns = (0, 1, 2)
        first_record = 0

    date_idx, desc_idx, amount_idx = columns
    records = _record_spans(normalized)
    transactions = []

    for row_num, row in enumerate(df.itertuples(index=False, name=None)):
        txn_date = normalize_date(_cell(row, date_idx), reference_year=reference_year)
        description = _cell(row, desc_idx)
        amount = parse_amount(_cell(row, amount_idx))
        if txn_date is None or not description or amount is None:
            continue

        record = row_num + first_record
        if record < len(records):
            rec_start, rec_end = records[record]
            start, end = offsets[lead + rec_start], offsets[lead + rec_end]
        else:
            start = end = 0
        transactions.append(ParsedTransaction(
            date=txn_date,
            description=description,
            amount=amount,
            span=(start, end),
            raw_match=source[start:end],
        ))

    return dedupe_and_sort(transactions)

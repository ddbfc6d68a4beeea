"""Tests for parsers/parser_statement.py and parsers/base.py"""

from __future__ import annotations

from datetime import date

import pytest

from analytics.categorizer import detect_vice_category
from models import CategoryMatch
from parsers.base import clean_description, dedup_key, normalize_date, normalize_line_endings, parse_amount
from parsers.parser_statement import parse_statement_text


# ---------------------------------------------------------------------------
# parse_statement_text
# ---------------------------------------------------------------------------

class TestParseStatementText:
    def test_issuer_pattern_wins_over_generic(self):
        txns = parse_statement_text("01/15/2024  STARBUCKS #12345 SEATTLE WA  -$5.75")
        assert len(txns) == 1
        assert txns[0].amount == 5.75
        assert txns[0].date == date(2024, 1, 15)
        assert txns[0].description == "STARBUCKS SEATTLE WA"

    def test_span_points_into_source(self):
        text = "01/15/2024  STARBUCKS #12345 SEATTLE WA  -$5.75"
        txn = parse_statement_text(text)[0]
        start, end = txn.span
        assert text[start:end] == txn.raw_match
        assert txn.raw_match.startswith("01/15/2024")

    def test_invalid_date_dropped(self):
        assert parse_statement_text("13/45/2024  STARBUCKS  $5.75") == []

    def test_balance_and_transfer_lines_skipped(self):
        text = "\n".join([
            "01/01/2024  BEGINNING BALANCE  $1,234.56",
            "01/15/2024  STARBUCKS #12345 SEATTLE WA  -$5.75",
            "01/20/2024  ONLINE TRANSFER TO SAVINGS  $200.00",
            "01/31/2024  ENDING BALANCE  $1,028.81",
        ])
        txns = parse_statement_text(text)
        assert [t.description for t in txns] == ["STARBUCKS SEATTLE WA"]

    def test_header_like_description_skipped(self):
        assert parse_statement_text("01/15/2024  Description of charges  $5.75") == []

    def test_wells_fargo_uses_reference_year(self):
        txns = parse_statement_text("01/15  DEBIT CARD PURCHASE STARBUCKS #12345  5.75", reference_year=2023)
        assert len(txns) == 1
        assert txns[0].date == date(2023, 1, 15)
        assert txns[0].description == "STARBUCKS"

    def test_bank_of_america_line(self):
        txns = parse_statement_text("01/05/24  Starbucks Coffee  $5.75  Debit")
        assert len(txns) == 1
        assert txns[0].date == date(2024, 1, 5)
        assert txns[0].description == "Starbucks Coffee"
        assert txns[0].amount == 5.75

    def test_duplicate_lines_collapsed(self):
        line = "01/15/2024  NETFLIX.COM  $15.99"
        assert len(parse_statement_text(f"{line}\n{line}")) == 1

    def test_sorted_by_date(self):
        text = "\n".join([
            "01/20/2024  NETFLIX.COM  $15.99",
            "01/03/2024  STARBUCKS STORE  $4.50",
            "01/11/2024  CHIPOTLE ONLINE  $12.40",
        ])
        assert [t.date.day for t in parse_statement_text(text)] == [3, 11, 20]

    def test_amount_over_bound_rejected(self):
        assert parse_statement_text("01/15/2024  TESLA MOTORS  $150,000.00") == []

    def test_windows_line_endings(self):
        text = "01/03/2024  STARBUCKS STORE  $4.50\r\n01/04/2024  NETFLIX.COM  $15.99\r\n"
        assert len(parse_statement_text(text)) == 2

    def test_crlf_span_points_into_source(self):
        text = "01/03/2024  STARBUCKS STORE  $4.50\r\n01/04/2024  NETFLIX.COM  $15.99\r\n"
        netflix = parse_statement_text(text)[1]
        start, end = netflix.span
        assert start == text.index("01/04/2024")
        assert text[start:end] == "01/04/2024  NETFLIX.COM  $15.99"
        assert netflix.raw_match == text[start:end]

    @pytest.mark.parametrize("text", ["", "no transactions here", "Page 1 of 3\n\n"])
    def test_nothing_to_parse(self, text):
        assert parse_statement_text(text) == []


class TestSummaryTotals:
    def test_merchant_named_total_is_spending(self):
        txns = parse_statement_text("01/15/2024  TOTAL WINE & MORE  $45.00")
        assert len(txns) == 1
        assert txns[0].description == "TOTAL WINE & MORE"
        assert detect_vice_category(txns) == [
            CategoryMatch(category="alcohol", match_count=1, total_amount=45.0),
        ]

    @pytest.mark.parametrize("line", [
        "01/31/2024  TOTAL  $523.10",
        "01/31/2024  SUBTOTAL  $75.00",
        "01/31/2024  TOTAL PURCHASES  $523.10",
        "01/31/2024  Total fees for this period  $35.00",
        "01/31/2024  TOTAL: $523.10",
    ])
    def test_summary_lines_skipped(self, line):
        assert parse_statement_text(line) == []


# ---------------------------------------------------------------------------
# normalize_date
# ---------------------------------------------------------------------------

class TestNormalizeDate:
    def test_month_day_with_reference_year(self):
        assert normalize_date("01/15", reference_year=2023) == date(2023, 1, 15)

    def test_month_day_defaults_to_current_year(self):
        assert normalize_date("01/15") == date(date.today().year, 1, 15)

    def test_two_digit_years(self):
        assert normalize_date("1/5/24") == date(2024, 1, 5)
        assert normalize_date("1/5/50") == date(2050, 1, 5)
        assert normalize_date("1/5/99") == date(1999, 1, 5)

    def test_four_digit_and_dash_formats(self):
        assert normalize_date("01/15/2024") == date(2024, 1, 15)
        assert normalize_date("02-29-2024") == date(2024, 2, 29)
        assert normalize_date("2024-03-01") == date(2024, 3, 1)

    @pytest.mark.parametrize("raw", ["13/45/2024", "02/30/2024", "2024-02-30", "garbage", "", None])
    def test_invalid_returns_none(self, raw):
        assert normalize_date(raw) is None


# ---------------------------------------------------------------------------
# parse_amount / clean_description / dedup_key
# ---------------------------------------------------------------------------

class TestParseAmount:
    def test_sign_dollar_and_commas(self):
        assert parse_amount("-$1,234.56") == 1234.56

    def test_parenthesized(self):
        assert parse_amount("(5.75)") == 5.75

    def test_upper_bound_inclusive(self):
        assert parse_amount("100000") == 100000.0
        assert parse_amount("100000.01") is None

    @pytest.mark.parametrize("raw", ["0.00", "abc", "", "nan", "inf"])
    def test_rejected(self, raw):
        assert parse_amount(raw) is None


class TestCleanDescription:
    def test_store_number_removed(self):
        assert clean_description("STARBUCKS #12345 SEATTLE WA") == "STARBUCKS SEATTLE WA"

    def test_trailing_reference_digits_removed(self):
        assert clean_description("SHELL OIL 57442611") == "SHELL OIL"

    def test_card_number_removed(self):
        assert clean_description("AMAZON CARD 1234 PURCHASE") == "AMAZON PURCHASE"

    def test_whitespace_collapsed(self):
        assert clean_description("  UBER \t EATS  ") == "UBER EATS"


class TestDedupKey:
    def test_case_and_punctuation_insensitive(self):
        assert dedup_key(date(2024, 1, 15), "Starbucks #123!", 5.751) == ("2024-01-15", "starbucks123", 5.75)

    def test_long_descriptions_truncated(self):
        a = dedup_key(date(2024, 1, 15), "ABCDEFGHIJKLMNOPQRSTUVWXYZ one", 1.0)
        b = dedup_key(date(2024, 1, 15), "abcdefghijklmnopqrstuvwxyz two", 1.0)
        assert a == b


class TestNormalizeLineEndings:
    def test_offsets_map_back_to_source(self):
        normalized, offsets = normalize_line_endings("a\r\nb\rc")
        assert normalized == "a\nb\nc"
        assert offsets == [0, 1, 3, 4, 5, 6]

    def test_unix_text_unchanged(self):
        normalized, offsets = normalize_line_endings("ab\nc")
        assert normalized == "ab\nc"
        assert offsets == [0, 1, 2, 3, 4]

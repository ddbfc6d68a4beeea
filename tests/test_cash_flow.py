"""Tests for analytics/cash_flow.py and cadence helpers in config.py"""

from datetime import date, timedelta

import pytest

from analytics.cash_flow import (
    analyze_cash_flow,
    annual_habit_cost,
    classify_strangulation,
    current_streak,
    monthly_habit_cost,
    total_annual_cost,
)
from config import cadence_multiplier, validate_symbol
from models import Cadence

TODAY = date(2024, 6, 14)


class TestHabitCost:
    @pytest.mark.parametrize("cadence,expected", [
        ("daily", 365 * 7.0), ("weekly", 52 * 7.0), ("biweekly", 26 * 7.0), ("monthly", 12 * 7.0),
    ])
    def test_annual(self, cadence, expected):
        assert annual_habit_cost(7.0, cadence) == pytest.approx(expected)

    def test_monthly_is_annual_over_twelve(self):
        assert monthly_habit_cost(50.0, "weekly") == pytest.approx(50.0 * 52 / 12)

    def test_enum_cadence_accepted(self):
        assert cadence_multiplier(Cadence.WEEKLY) == 52

    def test_unknown_cadence(self):
        with pytest.raises(ValueError, match="Unknown cadence"):
            annual_habit_cost(7.0, "hourly")

    def test_total_skips_inactive(self):
        habits = [
            {"amount": 10.0, "cadence": "weekly"},
            {"amount": 5.0, "cadence": "daily", "is_active": False},
        ]
        assert total_annual_cost(habits) == pytest.approx(520.0)


class TestAnalyzeCashFlow:
    def test_healthy(self):
        result = analyze_cash_flow(4000.0, 2500.0, 7.0, "daily")
        assert result.disposable_income == pytest.approx(1500.0)
        assert result.monthly_habit_cost == pytest.approx(365 * 7.0 / 12)
        assert result.strangulation_ratio == pytest.approx(result.monthly_habit_cost / 1500.0 * 100)
        assert result.after_habit == pytest.approx(1500.0 - result.monthly_habit_cost)
        assert result.level == "healthy"

    def test_critical(self):
        assert analyze_cash_flow(4000.0, 2500.0, 50.0, "daily").level == "critical"

    def test_no_disposable_income(self):
        result = analyze_cash_flow(2000.0, 2500.0, 7.0, "daily")
        assert result.strangulation_ratio == 0.0
        assert result.disposable_income == pytest.approx(-500.0)

    def test_negative_income_rejected(self):
        with pytest.raises(ValueError):
            analyze_cash_flow(-1.0, 0.0, 7.0, "daily")

    @pytest.mark.parametrize("ratio,level", [(0, "healthy"), (24.9, "healthy"), (25, "warning"), (50, "critical")])
    def test_levels(self, ratio, level):
        assert classify_strangulation(ratio) == level


class TestCurrentStreak:
    def test_run_ending_today(self):
        days = [TODAY - timedelta(days=i) for i in range(3)]
        assert current_streak(days, TODAY) == 3

    def test_run_ending_yesterday_still_counts(self):
        days = [TODAY - timedelta(days=i) for i in range(1, 5)]
        assert current_streak(days, TODAY) == 4

    def test_broken_run(self):
        assert current_streak([TODAY - timedelta(days=2)], TODAY) == 0

    def test_gap_stops_count(self):
        days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3)]
        assert current_streak(days, TODAY) == 2

    def test_no_days(self):
        assert current_streak([], TODAY) == 0


class TestValidateSymbol:
    def test_normalizes_case(self):
        assert validate_symbol(" spy ") == "SPY"

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Supported"):
            validate_symbol("DOGE")

"""Habit cost vs. monthly budget, and clean-day streaks."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from config import STRANGULATION_CRITICAL_PCT, STRANGULATION_WARNING_PCT, cadence_multiplier
from models import CashFlowAnalysis


def annual_habit_cost(amount: float, cadence: str) -> float:
    return amount * cadence_multiplier(cadence)


def monthly_habit_cost(amount: float, cadence: str) -> float:
    return annual_habit_cost(amount, cadence) / 12


def total_annual_cost(habits: Iterable[dict]) -> float:
    """Sum yearly cost over active habits ({"amount", "cadence", "is_active"})."""
    return sum(
        annual_habit_cost(float(h.get("amount", 0.0)), h.get("cadence", "weekly"))
        for h in habits
        if h.get("is_active", True)
    )


def classify_strangulation(ratio: float) -> str:
    if ratio >= STRANGULATION_CRITICAL_PCT:
        return "critical"
    if ratio >= STRANGULATION_WARNING_PCT:
        return "warning"
    return "healthy"


def analyze_cash_flow(net_income: float, fixed_costs: float, amount: float, cadence: str) -> CashFlowAnalysis:
    """Share of disposable income the habit eats each month.

    The ratio is 0 when there is no disposable income to compare against.
    """
    if net_income < 0 or fixed_costs < 0:
        raise ValueError("Income and fixed costs must be non-negative")

    annual = annual_habit_cost(amount, cadence)
    monthly = annual / 12
    disposable = net_income - fixed_costs
    ratio = (monthly / disposable * 100.0) if disposable > 0 else 0.0
    return CashFlowAnalysis(
        monthly_habit_cost=monthly,
        annual_habit_cost=annual,
        disposable_income=disposable,
        strangulation_ratio=ratio,
        after_habit=disposable - monthly,
        level=classify_strangulation(ratio),
    )


def current_streak(clean_days: Iterable[date], today: date) -> int:
    """Consecutive clean days ending today or yesterday; 0 if the run is broken."""
    days = sorted(set(clean_days), reverse=True)
    if not days:
        return 0
    if days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for prev, cur in zip(days, days[1:]):
        if prev - cur != timedelta(days=1):
            break
        streak += 1
    return streak

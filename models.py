"""Data models for habit-savings simulation and statement analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Union


class Cadence(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class PricePoint:
    """A daily close for one asset."""
    date: date
    close: float


@dataclass(frozen=True)
class GhostPolicy:
    """Buy only on scheduled dates the user actually logged as clean."""
    qualifying_dates: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_days(cls, days: Iterable) -> "GhostPolicy":
        """Build from date objects or ISO strings; malformed strings raise ValueError."""
        parsed = set()
        for d in days:
            parsed.add(d if isinstance(d, date) else date.fromisoformat(str(d).strip()))
        return cls(qualifying_dates=frozenset(parsed))

    @property
    def qualifying_day_count(self) -> int:
        return len(self.qualifying_dates)


@dataclass(frozen=True)
class PotentialPolicy:
    """Buy on every scheduled date (the 'if I'd never slipped' projection)."""


FundingPolicy = Union[GhostPolicy, PotentialPolicy]


@dataclass(frozen=True)
class SimulationInput:
    prices: tuple  # tuple[PricePoint, ...], ascending by date
    start_date: date
    cadence: Cadence
    amount_per_purchase: float
    policy: FundingPolicy = field(default_factory=PotentialPolicy)


@dataclass(frozen=True)
class PortfolioPoint:
    """Cumulative state of the hypothetical portfolio on one trading day."""
    date: date
    cash_spent: float
    portfolio_value: float
    shares_owned: float


@dataclass(frozen=True)
class PortfolioSummary:
    total_cash_spent: float = 0.0
    current_value: float = 0.0
    total_shares: float = 0.0
    gain_loss: float = 0.0
    gain_loss_percent: float = 0.0
    clean_days_count: int = 0
    purchases_count: int = 0


@dataclass(frozen=True)
class SimulationResult:
    portfolio: tuple  # tuple[PortfolioPoint, ...]
    summary: PortfolioSummary


@dataclass(frozen=True)
class ParsedTransaction:
    """A single debit extracted from statement text."""
    date: date
    description: str
    amount: float
    span: tuple  # (start, end) offsets into the text passed to the parser
    raw_match: str = ""


@dataclass(frozen=True)
class CategoryMatch:
    category: str
    match_count: int
    total_amount: float


@dataclass(frozen=True)
class TransactionSummary:
    count: int = 0
    total: float = 0.0
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class CashFlowAnalysis:
    """Monthly budget picture with the habit carved out."""
    monthly_habit_cost: float
    annual_habit_cost: float
    disposable_income: float
    strangulation_ratio: float  # habit cost as % of disposable income
    after_habit: float
    level: str  # "healthy", "warning", "critical"

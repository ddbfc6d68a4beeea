"""Dollar-cost-averaging simulator for ghost and potential portfolios.

A single synchronous pass over the price history. The ghost portfolio buys on
a scheduled date only when that exact date is in the user's set of logged
clean days; the potential portfolio buys on every scheduled date.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from analytics.scheduler import is_scheduled_date
from models import (
    Cadence,
    GhostPolicy,
    PortfolioPoint,
    PortfolioSummary,
    PotentialPolicy,
    PricePoint,
    SimulationInput,
    SimulationResult,
)

logger = logging.getLogger(__name__)


def is_chronological(prices: Iterable[PricePoint]) -> bool:
    """True when dates are non-decreasing."""
    prev: Optional[date] = None
    for p in prices:
        if prev is not None and p.date < prev:
            return False
        prev = p.date
    return True


def validate_input(sim_input: SimulationInput) -> None:
    """Reject configuration errors before any simulation work starts."""
    if not sim_input.amount_per_purchase or sim_input.amount_per_purchase <= 0:
        raise ValueError(
            f"amount_per_purchase must be positive, got {sim_input.amount_per_purchase!r}"
        )
    if sim_input.start_date is None:
        raise ValueError("start_date is required")
    Cadence(sim_input.cadence)
    if not isinstance(sim_input.policy, (GhostPolicy, PotentialPolicy)):
        raise ValueError(f"Unknown funding policy: {sim_input.policy!r}")


def summarize(
    portfolio: list[PortfolioPoint],
    clean_days_count: int,
    purchases_count: int,
) -> PortfolioSummary:
    """Derive the summary from the final portfolio point (zeros when empty)."""
    if not portfolio:
        return PortfolioSummary(clean_days_count=clean_days_count, purchases_count=purchases_count)

    last = portfolio[-1]
    gain_loss = last.portfolio_value - last.cash_spent
    gain_loss_pct = (gain_loss / last.cash_spent * 100.0) if last.cash_spent > 0 else 0.0
    return PortfolioSummary(
        total_cash_spent=last.cash_spent,
        current_value=last.portfolio_value,
        total_shares=last.shares_owned,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_pct,
        clean_days_count=clean_days_count,
        purchases_count=purchases_count,
    )


def _empty_result() -> SimulationResult:
    return SimulationResult(portfolio=(), summary=PortfolioSummary())


def simulate(sim_input: SimulationInput) -> SimulationResult:
    """Replay the purchase schedule over the price history.

    Prices must be sorted ascending by date. Out-of-order input is logged and
    the output is then undefined; nothing is raised. A close <= 0 is skipped
    as bad data: the day is still recorded with unchanged holdings.
    """
    validate_input(sim_input)

    policy = sim_input.policy
    ghost = isinstance(policy, GhostPolicy)
    if ghost and policy.qualifying_day_count == 0:
        return _empty_result()

    start = sim_input.start_date
    cadence = Cadence(sim_input.cadence)
    amount = float(sim_input.amount_per_purchase)
    relevant = [p for p in sim_input.prices if p.date >= start]

    if not is_chronological(relevant):
        logger.warning("Price history is not sorted ascending; results are undefined")

    shares_owned = 0.0
    cash_spent = 0.0
    purchases = 0
    portfolio: list[PortfolioPoint] = []

    for point in relevant:
        eligible = is_scheduled_date(point.date, cadence, start)
        if eligible and ghost:
            eligible = point.date in policy.qualifying_dates

        if eligible and point.close > 0:
            shares_owned += amount / point.close
            cash_spent += amount
            purchases += 1

        portfolio.append(PortfolioPoint(
            date=point.date,
            cash_spent=cash_spent,
            portfolio_value=shares_owned * point.close,
            shares_owned=shares_owned,
        ))

    clean_days = policy.qualifying_day_count if ghost else purchases
    return SimulationResult(
        portfolio=tuple(portfolio),
        summary=summarize(portfolio, clean_days, purchases),
    )


def simulate_ghost_portfolio(
    prices: Iterable[PricePoint],
    start_date: date,
    cadence: Cadence,
    amount: float,
    qualifying_dates: Iterable,
) -> SimulationResult:
    """Ghost portfolio: buy on scheduled dates that are also logged clean days."""
    return simulate(SimulationInput(
        prices=tuple(prices),
        start_date=start_date,
        cadence=Cadence(cadence),
        amount_per_purchase=amount,
        policy=GhostPolicy.from_days(qualifying_dates),
    ))


def simulate_potential_portfolio(
    prices: Iterable[PricePoint],
    start_date: date,
    cadence: Cadence,
    amount: float,
) -> SimulationResult:
    """Potential portfolio: buy on every scheduled date."""
    return simulate(SimulationInput(
        prices=tuple(prices),
        start_date=start_date,
        cadence=Cadence(cadence),
        amount_per_purchase=amount,
        policy=PotentialPolicy(),
    ))

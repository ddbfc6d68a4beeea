"""Tests for analytics/dca_engine.py"""

from __future__ import annotations

import logging
from datetime import date, timedelta

import pytest

from analytics.dca_engine import (
    is_chronological,
    simulate,
    simulate_ghost_portfolio,
    simulate_potential_portfolio,
)
from models import Cadence, GhostPolicy, PortfolioSummary, PricePoint, SimulationInput


def _prices(start: date, closes: list[float]) -> list[PricePoint]:
    return [PricePoint(date=start + timedelta(days=i), close=c) for i, c in enumerate(closes)]


SCENARIO = [
    PricePoint(date(2024, 1, 1), 100.0),
    PricePoint(date(2024, 1, 2), 100.0),
    PricePoint(date(2024, 1, 8), 110.0),
]


# ---------------------------------------------------------------------------
# Potential portfolio
# ---------------------------------------------------------------------------

class TestPotentialPortfolio:
    def test_weekly_scenario(self):
        result = simulate_potential_portfolio(SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0)

        last = result.portfolio[-1]
        assert len(result.portfolio) == 3
        assert last.shares_owned == pytest.approx(50 / 100 + 50 / 110)
        assert last.portfolio_value == pytest.approx(105.0)
        assert last.cash_spent == pytest.approx(100.0)
        assert result.summary.gain_loss == pytest.approx(5.0)
        assert result.summary.purchases_count == 2
        assert result.summary.clean_days_count == 2

    def test_non_scheduled_day_holds(self):
        result = simulate_potential_portfolio(SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0)
        second = result.portfolio[1]
        assert second.cash_spent == 50.0
        assert second.shares_owned == pytest.approx(0.5)
        assert second.portfolio_value == pytest.approx(50.0)

    def test_prices_before_start_ignored(self):
        prices = _prices(date(2023, 12, 28), [90, 95, 100, 105, 110, 115])
        result = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 10.0)
        assert result.portfolio[0].date == date(2024, 1, 1)
        assert result.summary.purchases_count == 2

    def test_gain_percent(self):
        result = simulate_potential_portfolio(SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0)
        s = result.summary
        assert s.gain_loss == pytest.approx(s.current_value - s.total_cash_spent)
        assert s.gain_loss_percent == pytest.approx(s.gain_loss / s.total_cash_spent * 100, abs=1e-9)

    def test_cash_and_shares_never_decrease(self):
        prices = _prices(date(2024, 1, 1), [100, 90, 120, 80, 110, 95, 130, 70])
        result = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 25.0)
        points = result.portfolio
        for prev, cur in zip(points, points[1:]):
            assert cur.cash_spent >= prev.cash_spent
            assert cur.shares_owned >= prev.shares_owned

    def test_cash_equals_amount_times_purchases(self):
        prices = _prices(date(2024, 1, 1), [100 + i for i in range(60)])
        result = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.BIWEEKLY, 12.5)
        assert result.summary.total_cash_spent == pytest.approx(12.5 * result.summary.purchases_count)

    def test_value_is_shares_times_close(self):
        prices = _prices(date(2024, 1, 1), [100, 120, 90])
        result = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 10.0)
        for point, price in zip(result.portfolio, prices):
            assert point.portfolio_value == pytest.approx(point.shares_owned * price.close)

    def test_zero_close_skipped_but_recorded(self):
        prices = _prices(date(2024, 1, 1), [100, 0, 100])
        result = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 50.0)
        assert len(result.portfolio) == 3
        assert result.portfolio[1].cash_spent == 50.0
        assert result.portfolio[1].portfolio_value == 0.0
        assert result.summary.purchases_count == 2

    def test_empty_prices(self):
        result = simulate_potential_portfolio([], date(2024, 1, 1), Cadence.DAILY, 10.0)
        assert result.portfolio == ()
        assert result.summary.total_cash_spent == 0
        assert result.summary.gain_loss_percent == 0


# ---------------------------------------------------------------------------
# Ghost portfolio
# ---------------------------------------------------------------------------

class TestGhostPortfolio:
    def test_empty_qualifying_set_returns_empty(self):
        result = simulate_ghost_portfolio(SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0, [])
        assert result.portfolio == ()
        assert result.summary == PortfolioSummary()

    def test_buys_only_on_logged_scheduled_dates(self):
        prices = _prices(date(2024, 1, 1), [100, 100, 100, 100, 100])
        clean = [date(2024, 1, 2), date(2024, 1, 4)]
        result = simulate_ghost_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 10.0, clean)
        assert result.summary.purchases_count == 2
        assert result.summary.total_cash_spent == pytest.approx(20.0)
        assert result.portfolio[0].cash_spent == 0.0
        assert result.portfolio[1].cash_spent == 10.0

    def test_clean_day_off_schedule_does_not_buy(self):
        # Jan 2 is a Tuesday; weekly schedule anchored on Monday Jan 1
        result = simulate_ghost_portfolio(SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0, [date(2024, 1, 2)])
        assert result.summary.purchases_count == 0
        assert result.summary.total_cash_spent == 0.0
        assert result.summary.gain_loss_percent == 0.0
        assert len(result.portfolio) == 3

    def test_clean_days_count_is_qualifying_set_size(self):
        prices = _prices(date(2024, 1, 1), [100, 100, 100])
        clean = [date(2023, 12, 30), date(2024, 1, 1), date(2024, 1, 3)]
        result = simulate_ghost_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 10.0, clean)
        assert result.summary.clean_days_count == 3
        assert result.summary.purchases_count == 2

    def test_accepts_iso_strings(self):
        result = simulate_ghost_portfolio(
            SCENARIO, date(2024, 1, 1), Cadence.WEEKLY, 50.0, ["2024-01-01", "2024-01-08"],
        )
        assert result.summary.purchases_count == 2
        assert result.summary.current_value == pytest.approx(105.0)

    def test_malformed_iso_string_raises(self):
        with pytest.raises(ValueError):
            GhostPolicy.from_days(["not-a-date"])

    def test_never_exceeds_potential(self):
        prices = _prices(date(2024, 1, 1), [100 + (i % 7) for i in range(40)])
        clean = [date(2024, 1, 1) + timedelta(days=i) for i in range(0, 40, 3)]
        ghost = simulate_ghost_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 5.0, clean)
        potential = simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 5.0)
        assert ghost.summary.total_cash_spent <= potential.summary.total_cash_spent
        assert ghost.summary.total_shares <= potential.summary.total_shares


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("amount", [0, -5.0])
    def test_non_positive_amount_raises(self, amount):
        with pytest.raises(ValueError, match="amount_per_purchase"):
            simulate(SimulationInput(
                prices=tuple(SCENARIO), start_date=date(2024, 1, 1),
                cadence=Cadence.DAILY, amount_per_purchase=amount,
            ))

    def test_missing_start_date_raises(self):
        with pytest.raises(ValueError, match="start_date"):
            simulate(SimulationInput(
                prices=tuple(SCENARIO), start_date=None,
                cadence=Cadence.DAILY, amount_per_purchase=10.0,
            ))

    def test_unknown_cadence_raises(self):
        with pytest.raises(ValueError):
            simulate(SimulationInput(
                prices=tuple(SCENARIO), start_date=date(2024, 1, 1),
                cadence="hourly", amount_per_purchase=10.0,
            ))

    def test_out_of_order_prices_warn(self, caplog):
        prices = [SCENARIO[2], SCENARIO[0], SCENARIO[1]]
        assert is_chronological(prices) is False
        with caplog.at_level(logging.WARNING, logger="analytics.dca_engine"):
            simulate_potential_portfolio(prices, date(2024, 1, 1), Cadence.DAILY, 10.0)
        assert "not sorted" in caplog.text

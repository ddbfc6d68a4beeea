"""Command-line habit-savings simulation.

Fetches price history, runs the ghost and potential portfolios side by side
and logs a summary.

Usage:
    python simulate.py --amount 7 --cadence daily --symbol SPY
    python simulate.py --amount 50 --cadence weekly --start 2024-01-01 --clean-days days.txt
    python simulate.py --statement statement.txt     # detect the costliest habit
    python simulate.py --log-today                   # record today as a clean day
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from analytics.aggregator import aggregate_by_month
from analytics.cash_flow import analyze_cash_flow, current_streak
from analytics.categorizer import detect_vice_category, summarize_transactions
from analytics.market_data import is_data_stale, load_price_history
from analytics.simulation_runner import ACTUAL, POTENTIAL, SimulationWorker, plan_dashboard_simulation, run_dashboard
from config import DEFAULT_SYMBOL, SUPPORTED_ASSETS
from db import get_clean_days, get_setting, init_db, log_clean_day
from models import Cadence, PortfolioSummary
from parsers.parser_csv import parse_csv_text
from parsers.parser_statement import parse_statement_text

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("simulate")


def _read_days(path: str) -> list[date]:
    days = []
    for line in Path(path).read_text().splitlines():
        line = line.strip()
        if line:
            days.append(date.fromisoformat(line))
    return days


def _log_summary(label: str, summary: PortfolioSummary):
    logger.info(
        "%s: invested $%.2f -> $%.2f (%+.2f, %+.1f%%) over %d purchases",
        label, summary.total_cash_spent, summary.current_value,
        summary.gain_loss, summary.gain_loss_percent, summary.purchases_count,
    )


def run_simulation(args) -> int:
    symbol = args.symbol.upper()
    prices = load_price_history(symbol)
    if is_data_stale(prices):
        logger.warning("%s: price data is stale or missing", symbol)

    start = date.fromisoformat(args.start) if args.start else None
    if start is None and get_setting("start_date"):
        start = date.fromisoformat(get_setting("start_date"))
    clean_days = _read_days(args.clean_days) if args.clean_days else get_clean_days()

    plan = plan_dashboard_simulation(prices, start, Cadence(args.cadence), args.amount, clean_days)
    if plan.is_demo:
        logger.info("Not enough history yet, showing a one-year projection from %s", plan.start_date)

    with SimulationWorker() as worker:
        results = run_dashboard(worker, plan)

    _log_summary("Ghost portfolio" if not plan.is_demo else "Projection", results[ACTUAL].summary)
    if POTENTIAL in results:
        _log_summary("Potential portfolio", results[POTENTIAL].summary)

    if args.monthly:
        for point in aggregate_by_month(results[ACTUAL].portfolio):
            logger.info("  %s  cash $%10.2f  value $%10.2f", point.date, point.cash_spent, point.portfolio_value)

    logger.info("Current streak: %d days", current_streak(clean_days, date.today()))

    if args.income:
        cash_flow = analyze_cash_flow(args.income, args.fixed_costs, args.amount, args.cadence)
        logger.info(
            "Habit costs $%.2f/month (%.1f%% of disposable income, %s)",
            cash_flow.monthly_habit_cost, cash_flow.strangulation_ratio, cash_flow.level,
        )
    return 0


def run_statement(path: str) -> int:
    text = Path(path).read_text(errors="replace")
    parse = parse_csv_text if path.lower().endswith(".csv") else parse_statement_text
    transactions = parse(text)
    summary = summarize_transactions(transactions)
    logger.info(
        "Parsed %d transactions totalling $%.2f (%s to %s)",
        summary.count, summary.total, summary.start_date, summary.end_date,
    )
    for match in detect_vice_category(transactions):
        logger.info("  %-14s %3d matches  $%.2f", match.category, match.match_count, match.total_amount)
    return 0


def main():
    parser = argparse.ArgumentParser(description="What if you invested the money you didn't spend?")
    parser.add_argument("--symbol", default=DEFAULT_SYMBOL, choices=sorted(SUPPORTED_ASSETS),
                        help="Asset to simulate")
    parser.add_argument("--amount", type=float, default=7.0, help="Amount per occurrence")
    parser.add_argument("--cadence", default="daily", choices=[c.value for c in Cadence])
    parser.add_argument("--start", help="Tracking start date (YYYY-MM-DD)")
    parser.add_argument("--clean-days", help="File with one ISO clean date per line")
    parser.add_argument("--monthly", action="store_true", help="Print month-end snapshots")
    parser.add_argument("--income", type=float, help="Monthly net income for cash-flow check")
    parser.add_argument("--fixed-costs", type=float, default=0.0, help="Monthly fixed costs")
    parser.add_argument("--statement", help="Bank statement text/CSV to scan for habits")
    parser.add_argument("--log-today", action="store_true", help="Record today as a clean day and exit")
    args = parser.parse_args()

    init_db()

    if args.log_today:
        added = log_clean_day()
        logger.info("Clean day %s", "logged" if added else "already logged")
        return 0
    if args.statement:
        return run_statement(args.statement)
    if args.amount <= 0:
        parser.error("--amount must be positive")
    return run_simulation(args)


if __name__ == "__main__":
    sys.exit(main())

"""Chart-scale reduction of portfolio trajectories."""

from __future__ import annotations

import pandas as pd

from models import PortfolioPoint

PORTFOLIO_COLUMNS = ["date", "cash_spent", "portfolio_value", "shares_owned"]


def aggregate_by_month(portfolio) -> list[PortfolioPoint]:
    """Keep the last point of each (year, month), in chronological order."""
    monthly: dict[tuple[int, int], PortfolioPoint] = {}
    for point in portfolio:
        # dict keeps first-insertion order, so months stay chronological
        monthly[(point.date.year, point.date.month)] = point
    return list(monthly.values())


def portfolio_to_frame(portfolio) -> pd.DataFrame:
    """Convert a trajectory to a DataFrame indexed by date for plotting."""
    if not portfolio:
        return pd.DataFrame(columns=PORTFOLIO_COLUMNS).set_index("date")

    df = pd.DataFrame([
        {
            "date": p.date,
            "cash_spent": p.cash_spent,
            "portfolio_value": p.portfolio_value,
            "shares_owned": p.shares_owned,
        }
        for p in portfolio
    ])
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")

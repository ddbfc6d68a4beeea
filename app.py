"""ViceVault: what if you invested the money you didn't spend?"""

from __future__ import annotations

import logging
from datetime import date

import plotly.graph_objects as go
import streamlit as st

from analytics.aggregator import aggregate_by_month, portfolio_to_frame
from analytics.cash_flow import annual_habit_cost, current_streak
from analytics.market_data import is_data_stale, load_price_history
from analytics.simulation_runner import ACTUAL, POTENTIAL, SimulationWorker, plan_dashboard_simulation, run_dashboard
from config import CADENCE_LABELS, DEFAULT_SYMBOL, SUPPORTED_ASSETS, VICE_PRESETS
from db import get_clean_days, get_setting, init_db, log_clean_day, remove_clean_day, set_setting
from models import Cadence
from ui_theme import COLORS, empty_state, inject_custom_css, page_header, plotly_layout

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

st.set_page_config(
    page_title="ViceVault",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

init_db()
inject_custom_css()
page_header("ViceVault", "What if you invested the money you didn't spend?")

# ---------------------------------------------------------------------------
# Cached helpers
# ---------------------------------------------------------------------------


@st.cache_data(ttl=3600, show_spinner=False)
def _cached_prices(symbol: str):
    return load_price_history(symbol)


@st.cache_resource
def _worker() -> SimulationWorker:
    return SimulationWorker()


# ---------------------------------------------------------------------------
# Sidebar: habit settings
# ---------------------------------------------------------------------------

presets = {p["name"]: p for p in VICE_PRESETS}
preset_names = list(presets)
cadences = [c.value for c in Cadence]
symbols = list(SUPPORTED_ASSETS)

with st.sidebar:
    st.subheader("Your Habit")
    saved_vice = get_setting("vice", preset_names[0])
    vice = st.selectbox(
        "Habit", preset_names,
        index=preset_names.index(saved_vice) if saved_vice in presets else 0,
    )
    preset = presets[vice]
    amount = st.number_input(
        "Amount per occurrence ($)", min_value=0.01, step=1.0,
        value=float(get_setting("amount", preset["amount"])),
    )
    saved_cadence = get_setting("cadence", preset["cadence"])
    cadence = st.selectbox(
        "How often", cadences,
        index=cadences.index(saved_cadence) if saved_cadence in cadences else 0,
        format_func=lambda c: CADENCE_LABELS[c],
    )
    saved_symbol = get_setting("symbol", DEFAULT_SYMBOL)
    symbol = st.selectbox(
        "Invest in", symbols,
        index=symbols.index(saved_symbol) if saved_symbol in symbols else 0,
        format_func=lambda s: f"{s} ({SUPPORTED_ASSETS[s]['name']})",
    )

    if st.button("Save settings", use_container_width=True):
        set_setting("vice", vice)
        set_setting("amount", amount)
        set_setting("cadence", cadence)
        set_setting("symbol", symbol)
        st.success("Saved.")

    st.divider()
    st.subheader("Clean Days")
    if st.button("I stayed clean today", type="primary", use_container_width=True):
        if log_clean_day():
            st.success("Logged. Nice work.")
        else:
            st.info("Today is already logged.")

    with st.expander("Edit log"):
        day = st.date_input("Day", value=date.today(), max_value=date.today())
        col_add, col_remove = st.columns(2)
        if col_add.button("Add", use_container_width=True):
            log_clean_day(day)
        if col_remove.button("Remove", use_container_width=True):
            remove_clean_day(day)

clean_days = get_clean_days()
start_raw = get_setting("start_date")
start_date = date.fromisoformat(start_raw) if start_raw else None
today = date.today()

# ---------------------------------------------------------------------------
# Streak + cost
# ---------------------------------------------------------------------------

col1, col2, col3, col4 = st.columns(4)
col1.metric("Current Streak", f"{current_streak(clean_days, today)} days")
col2.metric("Clean Days Logged", len(clean_days))
col3.metric("Habit Cost / Year", f"${annual_habit_cost(amount, cadence):,.0f}")
col4.metric("Tracking Since", start_date.isoformat() if start_date else "Not started")

st.divider()

# ---------------------------------------------------------------------------
# Ghost vs potential portfolio
# ---------------------------------------------------------------------------

with st.spinner(f"Loading {symbol} history..."):
    prices = _cached_prices(symbol)

if not prices:
    empty_state(f"No price history available for {symbol}.")
    st.stop()
if is_data_stale(prices, today):
    st.warning(f"{symbol} prices last updated {prices[-1].date}. Figures may be out of date.")

plan = plan_dashboard_simulation(prices, start_date, cadence, amount, clean_days, today=today)
results = run_dashboard(_worker(), plan)
actual = results[ACTUAL]

if plan.is_demo:
    st.info(
        f"You're just getting started, so here's what {CADENCE_LABELS[cadence].lower()} "
        f"${amount:,.2f} in {symbol} would have become since {plan.start_date}."
    )

summary = actual.summary
m1, m2, m3, m4 = st.columns(4)
m1.metric("Invested", f"${summary.total_cash_spent:,.2f}")
m2.metric(
    "Worth Today", f"${summary.current_value:,.2f}",
    delta=f"{summary.gain_loss_percent:+.1f}%",
)
m3.metric("Gain / Loss", f"${summary.gain_loss:,.2f}")
m4.metric("Purchases", summary.purchases_count)

fig = go.Figure()
actual_df = portfolio_to_frame(aggregate_by_month(actual.portfolio))
if not actual_df.empty:
    fig.add_trace(go.Scatter(
        x=actual_df.index, y=actual_df["cash_spent"],
        name="Cash Saved", line=dict(color=COLORS["text_muted"], dash="dot"),
    ))
    fig.add_trace(go.Scatter(
        x=actual_df.index, y=actual_df["portfolio_value"],
        name="Projection" if plan.is_demo else "Ghost Portfolio",
        line=dict(color=COLORS["green"], width=3),
    ))

if POTENTIAL in results:
    potential_df = portfolio_to_frame(aggregate_by_month(results[POTENTIAL].portfolio))
    if not potential_df.empty:
        fig.add_trace(go.Scatter(
            x=potential_df.index, y=potential_df["portfolio_value"],
            name="If Never Slipped", line=dict(color=COLORS["blue"], dash="dash"),
        ))

if fig.data:
    fig.update_layout(**plotly_layout("hero"))
    st.plotly_chart(fig, use_container_width=True)
else:
    empty_state("Log a clean day on a scheduled purchase date to start your ghost portfolio.")

if POTENTIAL in results:
    potential = results[POTENTIAL].summary
    missed = potential.current_value - summary.current_value
    st.caption(
        f"Every scheduled day clean would be worth ${potential.current_value:,.2f} "
        f"(${missed:,.2f} more than today)."
    )

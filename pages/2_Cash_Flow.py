"""Cash Flow page - how much of the monthly budget the habit eats."""

import streamlit as st
import plotly.graph_objects as go

from analytics.cash_flow import analyze_cash_flow
from config import CADENCE_LABELS
from db import get_setting, init_db, set_setting
from ui_theme import COLORS, LEVEL_COLORS, plotly_layout

init_db()
st.title("Cash Flow")
st.caption("Is the habit strangling your budget?")

amount = float(get_setting("amount", 7.0))
cadence = get_setting("cadence", "daily")

col1, col2 = st.columns(2)
income = col1.number_input("Monthly net income ($)", min_value=0.0, step=100.0,
                           value=float(get_setting("net_income", 4000.0)))
fixed = col2.number_input("Monthly fixed costs ($)", min_value=0.0, step=100.0,
                          value=float(get_setting("fixed_costs", 2500.0)))
if st.button("Save"):
    set_setting("net_income", income)
    set_setting("fixed_costs", fixed)

analysis = analyze_cash_flow(income, fixed, amount, cadence)

st.caption(f"Habit: ${amount:,.2f} {CADENCE_LABELS.get(cadence, cadence).lower()}")
m1, m2, m3, m4 = st.columns(4)
m1.metric("Habit / Month", f"${analysis.monthly_habit_cost:,.2f}")
m2.metric("Habit / Year", f"${analysis.annual_habit_cost:,.0f}")
m3.metric("Disposable", f"${analysis.disposable_income:,.2f}")
m4.metric("Left After Habit", f"${analysis.after_habit:,.2f}")

labels = ["Fixed Costs", "Habit", "Left Over"]
values = [fixed, analysis.monthly_habit_cost, max(analysis.after_habit, 0.0)]
fig = go.Figure(go.Bar(
    x=labels, y=values,
    marker_color=[COLORS["text_muted"], LEVEL_COLORS[analysis.level], COLORS["green"]],
    text=[f"${v:,.0f}" for v in values],
    textposition="outside",
    hovertemplate="%{x}: $%{y:,.2f}<extra></extra>",
))
fig.update_layout(**plotly_layout("compact", showlegend=False,
                                  title=f"Habit takes {analysis.strangulation_ratio:.1f}% of disposable income"))
st.plotly_chart(fig, use_container_width=True)

if analysis.disposable_income <= 0:
    st.error("Fixed costs use up all your income.")
elif analysis.level == "critical":
    st.error("The habit takes more than half of what's left each month.")
elif analysis.level == "warning":
    st.warning("The habit takes over a quarter of what's left each month.")
else:
    st.success("The habit fits in your budget, but imagine it invested instead.")

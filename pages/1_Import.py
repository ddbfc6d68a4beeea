"""Import page - paste or upload a bank statement, find the costliest habit."""

import streamlit as st
import pandas as pd
import plotly.express as px

from analytics.categorizer import categorize_transactions, detect_vice_category, summarize_transactions
from db import init_db, set_setting
from parsers.parser_csv import parse_csv_text
from parsers.parser_statement import parse_statement_text
from ui_theme import empty_state, plotly_layout

init_db()
st.title("Import Statement")
st.caption("Find out where the money goes.")

source = st.radio("Source", ["Paste text", "Upload CSV"], horizontal=True)

transactions = []
if source == "Paste text":
    text = st.text_area("Statement text", height=240,
                        placeholder="01/15/2024  STARBUCKS #12345 SEATTLE WA  -$5.75")
    if text.strip():
        transactions = parse_statement_text(text)
else:
    uploaded = st.file_uploader("Choose a CSV export", type=["csv", "txt"])
    if uploaded:
        transactions = parse_csv_text(uploaded.getvalue().decode("utf-8", errors="replace"))

if not transactions:
    empty_state("Paste statement text or upload a CSV to see your spending by habit.")
    st.stop()

summary = summarize_transactions(transactions)
col1, col2, col3, col4 = st.columns(4)
col1.metric("Transactions", summary.count)
col2.metric("Total Spent", f"${summary.total:,.2f}")
col3.metric("Average", f"${summary.average:,.2f}")
col4.metric("Period", f"{summary.start_date} to {summary.end_date}")

# === Habit ranking ===
ranked = detect_vice_category(transactions)
st.subheader("Habits Detected")
if not ranked:
    st.info("No habit spending matched. Try a longer statement.")
else:
    rank_df = pd.DataFrame([
        {"Category": m.category, "Matches": m.match_count, "Total": m.total_amount}
        for m in ranked
    ])
    fig = px.bar(rank_df, x="Category", y="Total", text="Matches")
    fig.update_layout(**plotly_layout("compact"))
    st.plotly_chart(fig, use_container_width=True)

    top = ranked[0]
    st.success(f"Biggest habit: **{top.category}** (${top.total_amount:,.2f} across {top.match_count} purchases)")

    chosen = st.selectbox("Show transactions for", [m.category for m in ranked])
    matched = categorize_transactions(transactions, chosen)
    avg = sum(t.amount for t in matched) / len(matched) if matched else 0.0
    if st.button(f"Track {chosen} (${avg:,.2f} per purchase)"):
        set_setting("amount", round(avg, 2))
        st.success("Habit amount saved. Head back to the dashboard.")

# === All transactions ===
with st.expander(f"All parsed transactions ({len(transactions)})"):
    st.dataframe(
        pd.DataFrame([
            {"Date": t.date.isoformat(), "Description": t.description, "Amount": t.amount}
            for t in transactions
        ]).style.format({"Amount": "${:,.2f}"}),
        use_container_width=True, hide_index=True,
    )

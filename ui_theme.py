"""Shared styling for the ViceVault Streamlit pages."""

from __future__ import annotations

import streamlit as st

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

COLORS = {
    "green": "#2ecc71",
    "red": "#e74c3c",
    "blue": "#3498db",
    "orange": "#f39c12",
    "purple": "#9b59b6",
    "border": "#1e3a5f",
    "text_muted": "#888",
}

LEVEL_COLORS = {
    "healthy": COLORS["green"],
    "warning": COLORS["orange"],
    "critical": COLORS["red"],
}

CHART_HEIGHTS = {
    "hero": 450,
    "standard": 380,
    "compact": 300,
}


# ---------------------------------------------------------------------------
# CSS injection
# ---------------------------------------------------------------------------

def inject_custom_css():
    """Card-style metrics and a tighter page top."""
    st.markdown("""
    <style>
    .block-container {
        padding-top: 1.5rem !important;
    }
    [data-testid="stMetric"] {
        background: linear-gradient(135deg, #16213e 0%, #1a1a2e 100%);
        border: 1px solid #1e3a5f;
        border-radius: 8px;
        padding: 12px 16px;
    }
    [data-testid="stMetric"] label {
        text-transform: uppercase;
        font-size: 0.7rem !important;
        letter-spacing: 0.05em;
        color: #888 !important;
    }
    </style>
    """, unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Helper components
# ---------------------------------------------------------------------------

def page_header(title: str, subtitle: str = ""):
    subtitle_html = f"<p style='color:#888;font-size:0.95rem;margin:0'>{subtitle}</p>" if subtitle else ""
    st.markdown(f"""
    <div style='margin-bottom:1rem'>
        <h1 style='
            background: linear-gradient(90deg, #2ecc71, #3498db);
            -webkit-background-clip: text;
            -webkit-text-fill-color: transparent;
            font-size: 2rem;
            font-weight: 700;
            margin: 0;
        '>{title}</h1>
        {subtitle_html}
    </div>
    """, unsafe_allow_html=True)


def empty_state(message: str):
    """Centered placeholder card for pages with nothing to show yet."""
    st.markdown(f"""
    <div style='
        text-align: center;
        padding: 2rem 1.5rem;
        border: 1px solid #1e3a5f;
        border-radius: 10px;
        margin: 1rem 0;
        color: #888;
    '>{message}</div>
    """, unsafe_allow_html=True)


def plotly_layout(height_key: str = "standard", **overrides) -> dict:
    """Consistent Plotly layout dict for dark-themed charts."""
    layout = {
        "height": CHART_HEIGHTS.get(height_key, CHART_HEIGHTS["standard"]),
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "xaxis": {"gridcolor": COLORS["border"]},
        "yaxis": {"gridcolor": COLORS["border"], "tickprefix": "$"},
        "legend": {"orientation": "h", "y": 1.08},
        "margin": {"l": 40, "r": 20, "t": 40, "b": 30},
    }
    layout.update(overrides)
    return layout

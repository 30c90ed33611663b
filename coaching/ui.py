"""
coaching/ui.py
Shared Streamlit widgets and plotly figures for the Cadence pages.
"""

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from coaching.auth import get_current_user, logout
from coaching.models import SCORE_DIMENSIONS, Scores

C_TEAL = "#4DB6AC"
C_TEXT = "#FAFAFA"
C_GRID = "rgba(255,255,255,0.15)"

SCORE_DESCRIPTIONS = {
    "tone": "Your overall communication tone.",
    "empathy": "How well you connect with others' feelings.",
    "clarity": "The conciseness and understanding of your messages.",
    "confidence": "Your perceived self-assurance in communication.",
}


def render_sidebar(key: str) -> None:
    """Page links, the signed-in user's email and a sign-out button."""
    with st.sidebar:
        st.page_link("pages/dashboard.py", label="Dashboard")
        st.page_link("pages/messages.py", label="Messages")
        st.page_link("pages/team.py", label="Team")
        st.page_link("pages/team_messages.py", label="Team Messages")
        st.page_link("pages/profile.py", label="Profile")
        st.divider()
        user = get_current_user()
        if user is not None:
            st.caption(user.email)
        if st.button("Sign Out", key=f"sidebar_signout_{key}"):
            logout()


def render_score_bars(scores: Scores) -> None:
    """One labelled progress bar per dimension."""
    for name in SCORE_DIMENSIONS:
        value = getattr(scores, name)
        col_label, col_bar, col_value = st.columns([1.2, 4.0, 0.8])
        with col_label:
            st.caption(name.title())
        with col_bar:
            st.progress(value / 100)
        with col_value:
            st.caption(f"{value}%")


def radar_figure(scores: Scores, name: str = "Your Score") -> go.Figure:
    """Polar chart of the four dimensions on a fixed 0-100 axis."""
    labels = [d.title() for d in SCORE_DIMENSIONS]
    values = [getattr(scores, d) for d in SCORE_DIMENSIONS]

    fig = go.Figure(
        go.Scatterpolar(
            r=values + values[:1],
            theta=labels + labels[:1],
            fill="toself",
            name=name,
            line=dict(color=C_TEAL),
            opacity=0.6,
        )
    )
    fig.update_layout(
        polar=dict(
            radialaxis=dict(range=[0, 100], gridcolor=C_GRID),
            angularaxis=dict(gridcolor=C_GRID),
            bgcolor="rgba(0,0,0,0)",
        ),
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(color=C_TEXT),
        showlegend=False,
        height=320,
        margin=dict(t=30, b=30, l=40, r=40),
    )
    return fig


def history_figure(frame: pd.DataFrame) -> go.Figure:
    """Line chart of each dimension over time, oldest message on the left."""
    long_df = (
        frame.assign(created_at=pd.to_datetime(frame["created_at"], errors="coerce"))
        .sort_values("created_at")
        .melt(
            id_vars=["created_at"],
            value_vars=list(SCORE_DIMENSIONS),
            var_name="dimension",
            value_name="score",
        )
    )
    fig = px.line(long_df, x="created_at", y="score", color="dimension", markers=True)
    fig.update_layout(
        yaxis=dict(range=[0, 100], title="Score"),
        xaxis=dict(title=""),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=C_TEXT),
        legend=dict(title=""),
        margin=dict(t=30, b=30, l=50, r=20),
    )
    return fig

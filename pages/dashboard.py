"""
pages/dashboard.py
Dashboard - the user's average communication scores at a glance.
"""

import logging

import streamlit as st

from coaching.auth import get_current_user, get_user_store, require_auth
from coaching.errors import CoachingError
from coaching.models import SCORE_DIMENSIONS, Scores
from coaching.profiles import get_profile
from coaching.ui import SCORE_DESCRIPTIONS, radar_figure, render_sidebar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Cadence · Dashboard", layout="wide")

require_auth()
render_sidebar("dashboard")

user = get_current_user()

st.markdown("# Dashboard")
st.caption("Your personal communication and leadership insights at a glance.")

try:
    profile = get_profile(get_user_store(), user.id)
except CoachingError as error:
    logger.error("Dashboard profile load failed: %s", error)
    st.error("Failed to load your scores. Please try again.")
    st.stop()

scores = profile.scores if profile is not None else Scores()

# ─── Score cards ──────────────────────────────────────────────────────────────

columns = st.columns(len(SCORE_DIMENSIONS))
for column, name in zip(columns, SCORE_DIMENSIONS):
    value = getattr(scores, name)
    with column:
        st.metric(f"{name.title()} Score", f"{value}%")
        st.progress(value / 100)
        st.caption(SCORE_DESCRIPTIONS[name])

st.divider()

# ─── Radar chart ──────────────────────────────────────────────────────────────

st.markdown("## Score Profile")
if scores == Scores():
    st.info("No scored messages yet. Send a message to get your first feedback.")
st.plotly_chart(radar_figure(scores), use_container_width=True)
st.caption("Each score is the average over every message you have sent.")

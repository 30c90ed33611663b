"""
app.py
Cadence - Leadership Communication Coaching
Entry point. Handles routing and session initialisation.
"""

import streamlit as st

from coaching.auth import is_authenticated
from coaching.logging_config import setup_logging

st.set_page_config(
    page_title   = "Cadence",
    page_icon    = "🧭",
    layout       = "wide",
    initial_sidebar_state = "expanded",
)

setup_logging()

# ── Session state initialisation ─────────────────────────────────────────────
if "user" not in st.session_state:
    st.session_state["user"] = None

# ── Routing ───────────────────────────────────────────────────────────────────
if not is_authenticated():
    st.switch_page("pages/login.py")
else:
    st.switch_page("pages/dashboard.py")

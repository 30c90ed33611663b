"""
pages/messages.py
Messages - write a message, get it scored, review past feedback.
"""

import logging

import pandas as pd
import streamlit as st

from coaching.auth import get_current_user, get_user_store, require_auth
from coaching.errors import CoachingError, RemoteError, ScoresNotUpdatedError, ValidationError
from coaching.scoring import ScoreAggregator, history_frame
from coaching.ui import history_figure, render_score_bars, render_sidebar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Cadence · Messages", layout="wide")

require_auth()
render_sidebar("messages")

user = get_current_user()
aggregator = ScoreAggregator(get_user_store())

st.markdown("# Messages")
st.caption("Send messages and receive instant AI feedback on your communication style.")

col_compose, col_history = st.columns(2)

# ─── Compose ──────────────────────────────────────────────────────────────────

with col_compose:
    st.markdown("### Send a New Message")
    with st.form("compose_message", clear_on_submit=True):
        text = st.text_area("Message", placeholder="Type your message here...", height=150)
        submitted = st.form_submit_button("Send Message & Get Feedback", use_container_width=True)

    if submitted:
        try:
            aggregator.submit_message(user.id, text)
            st.session_state["messages_flash"] = "Message sent and analyzed!"
            st.rerun()
        except ValidationError as error:
            st.warning(str(error))
        except ScoresNotUpdatedError as error:
            logger.error("Score refresh failed: %s", error)
            st.session_state["messages_warning"] = "Message saved, but your scores were not updated."
            st.rerun()
        except RemoteError as error:
            logger.error("Message submit failed: %s", error)
            st.error("Failed to send message. Please try again.")

    flash = st.session_state.pop("messages_flash", None)
    if flash:
        st.success(flash)
    warning = st.session_state.pop("messages_warning", None)
    if warning:
        st.warning(warning)

# ─── History ──────────────────────────────────────────────────────────────────

try:
    history = aggregator.score_history(user.id)
except CoachingError as error:
    logger.error("Feedback history load failed: %s", error)
    history = None

with col_history:
    st.markdown("### Message History & AI Feedback")
    if history is None:
        st.error("Failed to load your feedback history.")
    elif not history:
        st.caption("No messages sent yet. Start typing!")
    else:
        with st.container(height=480):
            for message in history:
                created = pd.to_datetime(message.created_at, errors="coerce")
                st.caption(created.strftime("%Y-%m-%d %H:%M") if pd.notna(created) else "")
                st.write(message.message_text)
                render_score_bars(message.scores)
                st.divider()

if history:
    st.markdown("## Score Trend")
    st.plotly_chart(history_figure(history_frame(history)), use_container_width=True)

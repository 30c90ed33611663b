"""
pages/team_messages.py
Team Messages - direct chat with an accepted teammate.
"""

import logging

import pandas as pd
import streamlit as st

from coaching.auth import get_current_user, get_user_store, require_auth
from coaching.errors import CoachingError, PermissionDeniedError, RemoteError, ValidationError
from coaching.messages import TeamMessenger
from coaching.teams import TeamResolver
from coaching.ui import render_sidebar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Cadence · Team Messages", layout="wide")

require_auth()
render_sidebar("team_messages")

user = get_current_user()
store = get_user_store()
messenger = TeamMessenger(store)

st.markdown("# Team Messages")
st.caption("Communicate directly with your teammates.")

try:
    teammates = TeamResolver(store).teammates(user)
except CoachingError as error:
    logger.error("Teammate load failed: %s", error)
    st.error("Failed to load teammates. Please try again.")
    st.stop()

if not teammates:
    st.info("No teammates yet. Invite someone on the Team page!")
    st.stop()

col_list, col_chat = st.columns([1, 2])

# ─── Teammate list ────────────────────────────────────────────────────────────

by_id = {t.id: t for t in teammates}
selected_id = st.session_state.get("selected_teammate_id")
if selected_id not in by_id:
    selected_id = teammates[0].id

with col_list:
    st.markdown("### Your Teammates")
    selected_id = st.radio(
        "Teammate",
        options=list(by_id),
        index=list(by_id).index(selected_id),
        format_func=lambda tid: f"{by_id[tid].display_name} ({by_id[tid].email})",
        label_visibility="collapsed",
    )
    st.session_state["selected_teammate_id"] = selected_id

teammate = by_id[selected_id]

# ─── Conversation ─────────────────────────────────────────────────────────────

with col_chat:
    st.markdown(f"### Chat with {teammate.display_name}")

    try:
        conversation = messenger.conversation(user, teammate.id)
    except CoachingError as error:
        logger.error("Conversation load failed: %s", error)
        conversation = None
        st.error("Failed to load messages.")

    with st.container(height=420):
        if conversation is not None and not conversation:
            st.caption("No messages yet. Start the conversation!")
        for message in conversation or []:
            role = "user" if message.sender_id == user.id else "assistant"
            with st.chat_message(role):
                st.write(message.message_text)
                sent_at = pd.to_datetime(message.created_at, errors="coerce")
                col_time, col_delete = st.columns([5, 1])
                with col_time:
                    st.caption(sent_at.strftime("%H:%M") if pd.notna(sent_at) else "")
                with col_delete:
                    if st.button("🗑", key=f"delete_msg_{message.id}"):
                        try:
                            messenger.delete(user, message.id)
                            st.rerun()
                        except PermissionDeniedError as error:
                            st.warning(str(error))
                        except RemoteError as error:
                            logger.error("Message delete failed: %s", error)
                            st.error("Failed to delete message.")

    text = st.chat_input("Type your message...")
    if text:
        try:
            messenger.send(user, teammate.id, text)
            st.rerun()
        except ValidationError as error:
            st.warning(str(error))
        except RemoteError as error:
            logger.error("Message send failed: %s", error)
            st.error("Failed to send message. Please try again.")

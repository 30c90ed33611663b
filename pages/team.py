"""
pages/team.py
Team - teammates, invitations sent and received, invite form.
"""

import logging

import streamlit as st

from coaching.auth import get_current_user, get_user_store, require_auth
from coaching.errors import CoachingError, ConflictError, RemoteError, ValidationError
from coaching.models import ACCEPTED, DECLINED
from coaching.profiles import avatar_initials
from coaching.teams import TeamResolver
from coaching.ui import render_sidebar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Cadence · Team", layout="wide")

require_auth()
render_sidebar("team")

user = get_current_user()
resolver = TeamResolver(get_user_store())

st.markdown("# Team")
st.caption("Invite teammates and manage your invitations.")

flash = st.session_state.pop("team_flash", None)
if flash:
    st.success(flash)

# ─── Invite form ──────────────────────────────────────────────────────────────

with st.expander("Invite Teammate", expanded=False):
    with st.form("invite_teammate", clear_on_submit=True):
        receiver_email = st.text_input("Email", placeholder="teammate@example.com")
        submitted = st.form_submit_button("Send Invite")

    if submitted:
        try:
            invite = resolver.send_invite(user, receiver_email)
            st.session_state["team_flash"] = f"Invitation sent to {invite.receiver_email}!"
            st.rerun()
        except ConflictError as error:
            st.info(str(error))
        except ValidationError as error:
            st.warning(str(error))
        except RemoteError as error:
            logger.error("Invite failed: %s", error)
            st.error("Failed to send invitation. Please try again.")

# ─── Data loading ─────────────────────────────────────────────────────────────

try:
    state = resolver.resolve_team_state(user)
except CoachingError as error:
    logger.error("Team state load failed: %s", error, exc_info=True)
    st.error("Failed to load your team. Please try again.")
    st.stop()

# ─── Received invitations ─────────────────────────────────────────────────────

st.markdown(f"### Invitations for You ({len(state.received_pending)})")
if not state.received_pending:
    st.caption("No pending invitations.")
for invite in state.received_pending:
    sender = invite.sender_profile
    sender_label = sender.display_name if sender is not None else "Someone"
    col_who, col_accept, col_decline = st.columns([4.0, 1.0, 1.0])
    with col_who:
        st.markdown(f"**{sender_label}** invited you to their team")
        if sender is not None:
            st.caption(sender.email)
    for column, decision, label in (
        (col_accept, ACCEPTED, "Accept"),
        (col_decline, DECLINED, "Decline"),
    ):
        with column:
            if st.button(label, key=f"invite_{decision}_{invite.id}"):
                try:
                    if resolver.respond_to_invite(invite.id, decision) is None:
                        st.session_state["team_flash"] = "That invitation was already answered."
                    else:
                        st.session_state["team_flash"] = f"Invitation {decision}."
                    st.rerun()
                except RemoteError as error:
                    logger.error("Invite response failed: %s", error)
                    st.error("Failed to update invitation. Please try again.")

st.divider()

# ─── Teammates ────────────────────────────────────────────────────────────────

st.markdown(f"### Your Teammates ({len(state.teammates)})")
if not state.teammates:
    st.caption("No teammates yet. Invite someone above!")
for teammate in state.teammates:
    col_avatar, col_identity, col_chat = st.columns([0.6, 4.4, 1.0])
    with col_avatar:
        st.markdown(f"**{avatar_initials(teammate)}**")
    with col_identity:
        st.markdown(f"**{teammate.display_name}**")
        st.caption(teammate.email)
    with col_chat:
        if st.button("Message", key=f"chat_{teammate.id}"):
            st.session_state["selected_teammate_id"] = teammate.id
            st.switch_page("pages/team_messages.py")

st.divider()

# ─── Sent invitations ─────────────────────────────────────────────────────────

st.markdown(f"### Sent Invitations ({len(state.sent_pending)})")
if not state.sent_pending:
    st.caption("No invitations awaiting a reply.")
for invite in state.sent_pending:
    st.markdown(f"{invite.receiver_email} · pending")

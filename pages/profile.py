"""
pages/profile.py
Profile - edit name and avatar.
"""

import logging

import streamlit as st

from coaching.auth import get_current_user, get_user_store, require_auth
from coaching.errors import CoachingError
from coaching.profiles import avatar_url, get_profile, update_profile
from coaching.ui import render_sidebar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Cadence · Profile", layout="centered")

require_auth()
render_sidebar("profile")

user = get_current_user()
store = get_user_store()

try:
    profile = get_profile(store, user.id)
except CoachingError as error:
    logger.error("Profile load failed: %s", error)
    st.error("Failed to load profile.")
    st.stop()

if profile is None:
    st.error("Your profile has not been created yet. Please sign in again shortly.")
    st.stop()

st.markdown("# Your Profile")
st.caption("Manage your personal information and avatar.")

flash = st.session_state.pop("profile_flash", None)
if flash:
    st.success(flash)

col_avatar, col_name = st.columns([1, 3])
with col_avatar:
    st.image(avatar_url(profile), width=96)
with col_name:
    st.markdown(f"## {profile.display_name}")
    st.caption(user.email)

with st.form("edit_profile"):
    first_name = st.text_input("First Name", value=profile.first_name)
    last_name = st.text_input("Last Name", value=profile.last_name)
    new_avatar = st.text_input(
        "Avatar URL",
        value=profile.avatar_url,
        placeholder="e.g., https://example.com/my-avatar.jpg",
    )
    saved = st.form_submit_button("Save Profile", use_container_width=True)

if saved:
    try:
        update_profile(store, user.id, first_name, last_name, new_avatar)
        st.session_state["profile_flash"] = "Profile updated successfully!"
        st.rerun()
    except CoachingError as error:
        logger.error("Profile update failed: %s", error)
        st.error("Failed to update profile.")

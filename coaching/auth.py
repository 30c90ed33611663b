"""
coaching/auth.py
Session management for Cadence.
Wraps Supabase Auth so the rest of the app never calls it directly.
"""

import logging

import streamlit as st

from coaching.db import BaseStore, get_store, get_supabase_client
from coaching.models import SessionUser

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


# ─── Session accessors ────────────────────────────────────────────────────────

def get_current_user() -> SessionUser | None:
    """
    Return the signed-in user from session state.

    Returns None if no active session exists.
    """
    return st.session_state.get("user", None)


def get_current_user_id() -> str | None:
    """Return the current user's UUID string, or None if not authenticated."""
    user = get_current_user()
    return user.id if user is not None else None


def is_authenticated() -> bool:
    """Return True if a user session is currently active."""
    return get_current_user() is not None


def _store_session(session) -> None:
    st.session_state["access_token"] = session.access_token
    st.session_state["refresh_token"] = session.refresh_token


def _clear_session() -> None:
    for key in ("user", "access_token", "refresh_token"):
        st.session_state.pop(key, None)


def refresh_session() -> str | None:
    """
    Return a valid access token for the signed-in user.

    Restores the saved session with Supabase Auth, which exchanges the
    refresh token when the access token has expired, and saves whatever
    tokens come back.  If the session cannot be restored it is cleared and
    the user is sent to the login page.
    """
    access_token = st.session_state.get("access_token")
    refresh_token = st.session_state.get("refresh_token")
    if not access_token or not refresh_token:
        return access_token

    try:
        response = get_supabase_client().auth.set_session(access_token, refresh_token)
    except Exception as exc:
        logger.info("Session restore failed: %s", exc)
        response = None

    if not (response and response.session):
        _clear_session()
        st.switch_page("pages/login.py")
        return None

    _store_session(response.session)
    return response.session.access_token


def get_user_store() -> BaseStore:
    """
    Return a store that runs requests as the signed-in user.

    Built fresh on every call so one user's token never serves another.
    """
    return get_store(access_token=refresh_session())


# ─── Auth guard ───────────────────────────────────────────────────────────────

def require_auth() -> None:
    """
    Guard for pages that require authentication.

    Redirects to the login page immediately if no session is active, and
    Streamlit stops rendering the rest of the page.
    """
    if not is_authenticated():
        st.switch_page("pages/login.py")


# ─── Sign in / sign up ────────────────────────────────────────────────────────

def sign_in(email: str, password: str) -> SessionUser | None:
    """
    Authenticate with email and password and store the session.

    Returns the SessionUser on success, None for bad credentials.  Auth
    errors are logged and reported as a failed sign-in.
    """
    try:
        response = get_supabase_client().auth.sign_in_with_password(
            {"email": email, "password": password}
        )
    except Exception as exc:
        logger.info("Sign-in failed for %s: %s", email, exc)
        return None

    if not (response and response.user and response.session):
        return None

    user = SessionUser(id=str(response.user.id), email=response.user.email or email)
    st.session_state["user"] = user
    _store_session(response.session)
    return user


def validate_registration(
    first_name: str, email: str, password: str, confirm_password: str
) -> str | None:
    """Return a message describing the first problem with the form, or None."""
    if not all([first_name, email, password, confirm_password]):
        return "All fields are required."
    if password != confirm_password:
        return "Passwords must match."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def sign_up(first_name: str, last_name: str, email: str, password: str) -> bool:
    """
    Register a new account.

    Names travel as user metadata; the profiles row is created by the
    database on signup.  Returns True when Supabase accepted the request.
    """
    try:
        get_supabase_client().auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {"data": {"first_name": first_name, "last_name": last_name}},
            }
        )
    except Exception as exc:
        logger.warning("Sign-up failed for %s: %s", email, exc)
        return False
    return True


# ─── Session teardown ─────────────────────────────────────────────────────────

def logout() -> None:
    """
    Sign the current user out and redirect to the login page.

    The local session is always cleared, even if the remote sign-out fails.
    """
    _clear_session()
    try:
        get_supabase_client().auth.sign_out()
    except Exception as exc:
        logger.info("Remote sign-out failed: %s", exc)
    st.switch_page("pages/login.py")

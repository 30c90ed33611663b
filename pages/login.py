"""
pages/login.py
Login and registration page.
"""

import streamlit as st

from coaching.auth import sign_in, sign_up, validate_registration

st.set_page_config(page_title="Cadence · Sign In", page_icon="🧭", layout="centered")

if "user" not in st.session_state:
    st.session_state["user"] = None

if st.session_state["user"] is not None:
    st.switch_page("pages/dashboard.py")

st.markdown(
    """
    <style>
        .stButton > button {
            background-color: #4DB6AC;
            color: #0E1117;
            border: 1px solid #4DB6AC;
            font-weight: 600;
        }
    </style>
    """,
    unsafe_allow_html=True,
)

st.markdown("# Cadence")
st.caption("Leadership communication coaching")

sign_in_tab, create_account_tab = st.tabs(["Sign In", "Create Account"])

with sign_in_tab:
    email = st.text_input("Email", key="sign_in_email")
    password = st.text_input("Password", type="password", key="sign_in_password")

    if st.button("Sign In", use_container_width=True):
        if sign_in(email.strip(), password) is not None:
            st.switch_page("pages/dashboard.py")
        else:
            st.error("Invalid email or password. Please try again.")

with create_account_tab:
    col_first, col_last = st.columns(2)
    with col_first:
        first_name = st.text_input("First name", key="register_first_name")
    with col_last:
        last_name = st.text_input("Last name", key="register_last_name")
    register_email = st.text_input("Email", key="register_email")
    register_password = st.text_input("Password", type="password", key="register_password")
    confirm_password = st.text_input("Confirm password", type="password", key="confirm_password")

    if st.button("Create Account", use_container_width=True):
        problem = validate_registration(
            first_name, register_email, register_password, confirm_password
        )
        if problem:
            st.warning(problem)
        elif sign_up(first_name.strip(), last_name.strip(), register_email.strip(), register_password):
            st.success(
                "Account created. Please check your email to confirm your address before signing in."
            )
        else:
            st.error("Could not create account. Please try again.")

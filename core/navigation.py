# core/navigation.py
import streamlit as st

# per-login objects; rebuilt from the new token after the next sign-in
_SESSION_KEYS = ("admin_session", "api_client", "controllers")


def navigate_to_login():
    """Drop the signed-in session and show the login screen."""
    for key in _SESSION_KEYS:
        st.session_state.pop(key, None)
    st.session_state["show_login"] = True
    st.rerun()


def navigate_to_app():
    st.session_state.pop("show_login", None)
    st.rerun()

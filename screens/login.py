# screens/login.py
from __future__ import annotations
import streamlit as st

from core import session_store
from core.api_client import ApiClient
from core.auth import login
from core.errors import ApiError
from core.navigation import navigate_to_app
from core.notify import handle_error
from screens.common.state import auth_flags, get_engine_cached, get_settings


def _hide_sidebar():
    st.markdown(
        """
        <style>
            section[data-testid="stSidebar"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render():
    _hide_sidebar()
    settings = get_settings()
    st.title(f"🔐 {settings.app.name}")
    st.caption("Sign in with your admin account.")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary")

    if not submitted:
        return

    client = ApiClient(settings.api.base_url, timeout=settings.api.timeout_seconds)
    try:
        with st.spinner("Signing in..."):
            session = login(client, email, password)
    except ApiError as e:
        handle_error(e, "Login failed")
        return

    session_store.save(get_engine_cached(), session)
    st.session_state["admin_session"] = session
    auth_flags()["expired"] = False
    navigate_to_app()

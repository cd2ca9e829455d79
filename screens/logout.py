# screens/logout.py
from __future__ import annotations
import logging
import streamlit as st

from core import session_store
from core.navigation import navigate_to_login
from screens.common.state import current_session, get_engine_cached

logger = logging.getLogger(__name__)


def render():
    st.title("🚪 Logout")
    session = current_session()
    if session is None:
        st.info("You are already logged out")
    else:
        st.write(f"Signed in as **{session.display_name}**")

    if st.button("Logout", type="primary"):
        # sign-out is local: the stored token is forgotten
        session_store.clear(get_engine_cached())
        logger.info("Admin %s signed out", session.email if session else "unknown")
        for key in [k for k in st.session_state.keys() if str(k).endswith(("_mode", "_pending_delete"))]:
            del st.session_state[key]
        navigate_to_login()


if __name__ == "__main__":
    render()

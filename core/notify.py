# core/notify.py
from __future__ import annotations
import logging
from typing import Optional

import streamlit as st

from core.errors import ApiError
from core.settings import load_settings

logger = logging.getLogger(__name__)


def _debug_enabled() -> bool:
    settings = st.session_state.get("settings") or load_settings()
    return bool(getattr(settings.app, "debug", False))


def handle_error(e: Exception, user_message: str = "An error occurred.", debug: Optional[bool] = None):
    """
    Log the full exception and show a friendly message.
    Backend messages are shown as-is; debug mode appends the exception text.
    """
    logger.error("%s: %s", user_message, e, exc_info=True)
    if isinstance(e, ApiError) and e.message:
        user_message = e.message
    if debug is None:
        debug = _debug_enabled()
    if debug:
        st.error(f"{user_message}\n\n**Debug Info:**\n```\n{e!r}\n```")
    else:
        st.error(user_message)


def flash(message: str, icon: str = "✅"):
    """Toast that survives the st.rerun() which usually follows a mutation."""
    st.session_state.setdefault("_flash", []).append((message, icon))


def show_flashes():
    for message, icon in st.session_state.pop("_flash", []):
        st.toast(message, icon=icon)

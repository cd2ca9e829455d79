# app.py
from __future__ import annotations
import logging
import os
from pathlib import Path
import streamlit as st

from screens.common.state import auth_flags, current_session, get_engine_cached, get_settings
from screens import login as login_screen

APP_DIR = Path(__file__).resolve().parent
SCREENS_DIR = APP_DIR / "screens"

# (route stem, title, section)
PAGES = [
    ("dashboard", "📊 Dashboard", "Overview"),
    ("enquiry", "📨 Enquiry Forms", "Forms"),
    ("complaint_feedback", "💬 Complaints & Feedback", "Forms"),
    ("admission_forms", "📝 Admission Forms", "Forms"),
    ("results", "🏆 Results", "Exams"),
    ("gaet_results", "🎯 GAET Results", "Exams"),
    ("gaet_dates", "📅 GAET Dates", "Exams"),
    ("gvet_answer_keys", "🔑 GVET Answer Keys", "Exams"),
    ("video_solutions", "🎬 Video Solutions", "Exams"),
    ("banners", "🖼️ Banners", "Content"),
    ("blogs", "✍️ Blogs", "Content"),
    ("news_events", "📰 News & Events", "Content"),
    ("public_notices", "📢 Public Notices", "Content"),
    ("courses", "📚 Courses", "Content"),
    ("upload_history", "🗂️ Upload History", "Admin"),
    ("logout", "🚪 Logout", "Admin"),
]


def _configure_logging(debug: bool):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_pages() -> dict[str, list]:
    sections: dict[str, list] = {}
    missing = []
    for stem, title, section in PAGES:
        path = SCREENS_DIR / f"{stem}.py"
        if not path.exists():
            missing.append(stem)
            continue
        relative = str(path.relative_to(APP_DIR)).replace(os.path.sep, "/")
        sections.setdefault(section, []).append(
            st.Page(relative, title=title, default=(stem == "dashboard"), url_path=stem)
        )
    if missing:
        st.sidebar.warning(f"Missing pages: {missing}")
    return sections


def main():
    settings = get_settings()
    _configure_logging(settings.app.debug)
    st.set_page_config(page_title=settings.app.name, layout="wide", page_icon="🎓")

    # 1. Local store (session token, upload history); tables created once per session.
    try:
        get_engine_cached()
    except Exception as e:
        st.error("Local database initialization failed. See details below.")
        with st.expander("Diagnostics"):
            st.exception(e)
        st.stop()

    # 2. A 401 anywhere since the last run sends the admin back to login.
    if auth_flags().get("expired"):
        auth_flags()["expired"] = False
        for key in ("admin_session", "api_client", "controllers"):
            st.session_state.pop(key, None)
        st.session_state["show_login"] = True
        st.warning("Your session has expired. Please log in again.")

    session = current_session()
    if st.session_state.get("show_login") or session is None:
        login_screen.render()
        return

    st.sidebar.caption(f"Signed in as **{session.display_name}**")
    st.sidebar.caption(f"Backend: {settings.api.base_url}")

    nav = st.navigation(_build_pages(), position="sidebar")
    nav.run()


if __name__ == "__main__":
    main()

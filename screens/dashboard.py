# screens/dashboard.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from core.dashboard_stats import ACTIVITY_SOURCES, STAT_CARDS, fetch_all_stats, recent_activity
from core.errors import ApiError, UnauthorizedError
from core.navigation import navigate_to_login
from core.notify import handle_error, show_flashes
from screens.common.state import current_session, get_api

CARD_TITLES = {
    "enquiryForms": "📨 Enquiry Forms",
    "complaintsFeedback": "💬 Complaints & Feedback",
    "newsEvents": "📰 News & Events",
    "publicNotices": "📢 Public Notices",
    "blogs": "✍️ Blogs",
    "results": "🏆 Results",
}


def render():
    show_flashes()
    session = current_session()
    st.title("📊 Dashboard")
    if session:
        st.caption(f"Welcome back, **{session.display_name}**")

    apis = {key: get_api(key) for key in set(STAT_CARDS.values()) | set(ACTIVITY_SOURCES)}

    stats = fetch_all_stats(apis)
    if not stats.success:
        st.warning("Some statistics could not be loaded; showing zeros.")
    cols = st.columns(3)
    for i, card in enumerate(STAT_CARDS):
        cols[i % 3].metric(CARD_TITLES[card], stats.counts.get(card, 0))

    st.markdown("---")
    st.subheader("Recent activity")
    try:
        activity = recent_activity(apis)
    except UnauthorizedError:
        navigate_to_login()
        return
    except ApiError as e:
        handle_error(e, "Failed to load recent activity")
        return

    if not activity:
        st.info("No recent activity")
        return
    df = pd.DataFrame(activity, columns=["type", "name", "email", "status", "time"])
    df["time"] = pd.to_datetime(df["time"], errors="coerce", utc=True).dt.strftime("%Y-%m-%d %H:%M")
    df.columns = ["Type", "Name", "Email", "Status", "Time"]
    st.dataframe(df, use_container_width=True, hide_index=True)


if __name__ == "__main__":
    render()

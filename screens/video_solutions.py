# screens/video_solutions.py
import streamlit as st

from screens.common.table_view import render_resource_page

TABS = {
    "AITS": "aits_video_solutions",
    "Spot Test": "spot_test_video_solutions",
}


def render():
    choice = st.radio("Series", list(TABS), horizontal=True, key="video_series")
    render_resource_page(TABS[choice], icon="🎬")


if __name__ == "__main__":
    render()

# screens/news_events.py
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("news_events", icon="📰")


if __name__ == "__main__":
    render()

# screens/complaint_feedback.py
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("complaint_feedback", icon="💬")


if __name__ == "__main__":
    render()

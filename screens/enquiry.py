# screens/enquiry.py
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("enquiry", icon="📨")


if __name__ == "__main__":
    render()

# screens/courses.py
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("courses", icon="📚")


if __name__ == "__main__":
    render()

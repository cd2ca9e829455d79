# screens/gvet_answer_keys.py
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("gvet_answer_keys", icon="🔑")


if __name__ == "__main__":
    render()

# screens/gaet_results.py
from screens.common.result_upload import render_upload_panel
from screens.common.table_view import render_resource_page


def render():
    render_resource_page("gaet_results", icon="🎯", before_table=render_upload_panel)


if __name__ == "__main__":
    render()

# screens/upload_history.py
import streamlit as st

from core import upload_history
from core.result_columns import GAET_RESULT_FORMAT, RESULT_FORMAT
from screens.common.state import get_engine_cached

RESOURCE_CHOICES = {
    "All": None,
    RESULT_FORMAT.title: RESULT_FORMAT.key,
    GAET_RESULT_FORMAT.title: GAET_RESULT_FORMAT.key,
}


def render():
    st.title("🗂️ Upload History")
    st.caption("Every bulk CSV upload made from this dashboard, with the client-side and backend row counts.")

    c1, c2 = st.columns([2, 1])
    choice = c1.selectbox("Resource", list(RESOURCE_CHOICES), key="uh_resource")
    limit = c2.number_input("Show last", min_value=10, max_value=500, value=50, step=10, key="uh_limit")

    df = upload_history.recent(get_engine_cached(), resource=RESOURCE_CHOICES[choice], limit=int(limit))
    if df.empty:
        st.info("No uploads recorded yet.")
        return

    df = df.rename(columns={
        "at": "When", "resource": "Resource", "file_name": "File", "status": "Status",
        "client_rows": "Rows parsed", "client_dropped": "Rows skipped",
        "inserted_count": "Inserted", "message": "Message", "uploaded_by": "By",
    })
    st.dataframe(df, use_container_width=True, hide_index=True)

    failed = int((df["Status"] == "failed").sum())
    if failed:
        st.warning(f"{failed} failed upload(s) in this view.")


if __name__ == "__main__":
    render()

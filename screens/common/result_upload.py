# screens/common/result_upload.py
# -------------------------------------------------------------------
# "Upload CSV" panel for the Results and GAET Results pages.
#   pick file -> client-side parse + preview -> upload raw file ->
#   on success close the panel, clear file/preview and re-fetch.
# -------------------------------------------------------------------
from __future__ import annotations

import streamlit as st

from core.csv_ingest import check_csv_name, parse_results_csv, preview_frame, template_csv
from core.csv_export import generate_filename
from core.errors import ApiError, CsvParseError, UnauthorizedError
from core.list_controller import ListController
from core.navigation import navigate_to_login
from core.notify import flash, handle_error
from core.uploader import format_for, submit_results_csv
from screens.common.state import current_session, get_engine_cached, get_settings


def _reset(key: str):
    st.session_state[f"{key}_upload_open"] = False
    # a fresh widget key is the only way to clear st.file_uploader
    st.session_state[f"{key}_uploader_n"] = st.session_state.get(f"{key}_uploader_n", 0) + 1


def render_upload_panel(ctrl: ListController):
    key = ctrl.spec.key
    fmt = format_for(ctrl.api)
    open_key = f"{key}_upload_open"

    if st.button("📤 Upload CSV", key=f"{key}_upload_toggle"):
        st.session_state[open_key] = not st.session_state.get(open_key, False)
    if not st.session_state.get(open_key):
        return

    with st.container(border=True):
        st.subheader(f"Upload {fmt.title} CSV")
        st.caption("Expected headers: " + ", ".join(fmt.headers))
        st.download_button(
            "Download template", template_csv(fmt),
            file_name=generate_filename(f"{key}_template"), mime="text/csv",
            key=f"{key}_template_dl",
        )

        uploaded = st.file_uploader(
            "CSV file", type=["csv"],
            key=f"{key}_uploader_{st.session_state.get(f'{key}_uploader_n', 0)}",
        )
        if uploaded is None:
            return

        content = uploaded.getvalue()
        try:
            check_csv_name(uploaded.name)
            report = parse_results_csv(content, fmt)
        except CsvParseError as e:
            st.error(str(e))
            return

        st.success(report.summary())
        if report.missing_headers:
            st.warning("Missing columns (filled with defaults): " + ", ".join(report.missing_headers))
        if report.unknown_headers:
            st.caption("Ignored columns: " + ", ".join(report.unknown_headers))

        limit = get_settings().ui.preview_rows
        st.dataframe(preview_frame(report.rows, fmt, limit=limit), use_container_width=True, hide_index=True)
        if report.parsed_count > limit:
            st.caption(f"Showing first {limit} of {report.parsed_count} records.")

        upload_col, cancel_col = st.columns(2)
        if cancel_col.button("Cancel", key=f"{key}_upload_cancel"):
            _reset(key)
            st.rerun()
        if not upload_col.button("Upload", type="primary", key=f"{key}_upload_go",
                                 disabled=report.parsed_count == 0):
            return

        session = current_session()
        try:
            with st.spinner("Uploading..."):
                outcome = submit_results_csv(
                    ctrl.api, uploaded.name, content,
                    uploaded_by=session.email if session else None,
                    engine=get_engine_cached(),
                    client_rows=report,
                )
        except UnauthorizedError:
            navigate_to_login()
            return
        except ApiError as e:
            # panel stays open so the admin can fix the file and retry
            handle_error(e, "Upload failed")
            return

        flash(outcome.message)
        _reset(key)
        # re-fetched by the list on the next run
        ctrl.loaded = False
        st.rerun()

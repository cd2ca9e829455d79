# screens/common/table_view.py
# -------------------------------------------------------------------
# Shared list screen used by every resource page:
#   toolbar (refresh / add / export) -> search + filters -> table with
#   row selection -> pagination -> actions on the picked record.
# All state lives in the resource's ListController; this module only
# renders it and routes widget events back into it.
# -------------------------------------------------------------------
from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from core.csv_export import generate_filename, records_to_csv
from core.errors import ApiError, UnauthorizedError, ValidationError
from core.forms import blank_form, form_from_record
from core.list_controller import ListController
from core.navigation import navigate_to_login
from core.notify import flash, handle_error, show_flashes
from core.resources import ALL, FilterDef, ResourceSpec, record_id
from screens.common.forms import as_date, render_fields
from screens.common.state import get_controller

logger = logging.getLogger(__name__)

Extra = Callable[[ListController], None]

_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _label(text: str) -> str:
    out = _CAMEL.sub(" ", str(text)).replace("_", " ")
    return out.strip().capitalize()


def _display(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return value.get("name") or value.get("email") or json.dumps(value, ensure_ascii=False)
    return value


def _run(action: Callable[[], Any], user_message: str) -> bool:
    """Run a controller call; errors are shown, a 401 goes back to login."""
    try:
        action()
        return True
    except UnauthorizedError:
        navigate_to_login()
    except ValidationError as e:
        st.error(str(e))
    except ApiError as e:
        handle_error(e, user_message)
    return False


# ---------- toolbar ----------

def _toolbar(ctrl: ListController):
    spec = ctrl.spec
    cols = st.columns([1, 1, 1, 1, 3])
    if cols[0].button("🔄 Refresh", key=f"{spec.key}_refresh"):
        _run(ctrl.refresh, f"Failed to load {spec.title.lower()}")
    if spec.creatable and cols[1].button("➕ Add", key=f"{spec.key}_add"):
        st.session_state[f"{spec.key}_mode"] = ("create", None)
    rows = ctrl.view()
    cols[2].download_button(
        "⬇️ Export",
        records_to_csv(rows, spec.columns, [_label(c) for c in spec.columns]),
        file_name=generate_filename(spec.key),
        mime="text/csv",
        disabled=not rows,
        key=f"{spec.key}_export",
    )
    if spec.csv_download:
        if cols[3].button("📥 Full CSV", key=f"{spec.key}_full_csv"):
            try:
                st.session_state[f"{spec.key}_full_csv_data"] = ctrl.api.download_csv(ctrl.params())
            except UnauthorizedError:
                navigate_to_login()
            except ApiError as e:
                handle_error(e, "Failed to download CSV")
        data = st.session_state.get(f"{spec.key}_full_csv_data")
        if data:
            cols[4].download_button(
                "Save backend CSV", data,
                file_name=generate_filename(spec.key.replace("_", "-")),
                mime="text/csv", key=f"{spec.key}_full_csv_save",
            )


def _stats(ctrl: ListController) -> Dict[str, Any]:
    try:
        stats = ctrl.api.stats()
    except UnauthorizedError:
        navigate_to_login()
        return {}
    except ApiError as e:
        logger.warning("%s stats unavailable: %s", ctrl.spec.key, e)
        return {}
    numbers = [(k, v) for k, v in stats.items() if isinstance(v, (int, float)) and not isinstance(v, bool)]
    if numbers:
        cols = st.columns(min(len(numbers), 4))
        for i, (k, v) in enumerate(numbers[:8]):
            cols[i % len(cols)].metric(_label(k), v)
    return stats


# ---------- search / filters ----------

_ORDERS = {"desc": "Descending", "asc": "Ascending"}


def _filter_widget(col, f: FilterDef, current: str, key: str, stats: Dict[str, Any]) -> str:
    if f.kind == "date":
        picked = col.date_input(f.label, value=as_date(current), key=key)
        return picked.isoformat() if picked else ""
    if f.kind in ("text", "int"):
        return col.text_input(f.label, value="" if current == ALL else current, key=key)
    options = f.options_for(stats)
    return col.selectbox(
        f.label, options, index=options.index(current) if current in options else 0,
        format_func=lambda o: "All" if o == ALL else (o if f.options_from else _label(o)), key=key,
    )


def _filters(ctrl: ListController, stats: Optional[Dict[str, Any]] = None):
    spec = ctrl.spec
    top = st.columns([3, 1, 1] if spec.sort_options else [1])
    search = top[0].text_input(
        "Search", value=ctrl.query.search, key=f"{spec.key}_search", placeholder="Search…",
    )
    changes: Dict[str, Any] = {"search": search}
    if spec.sort_options:
        changes["sort_by"] = top[1].selectbox(
            "Sort by", spec.sort_options,
            index=spec.sort_options.index(ctrl.query.sort_by) if ctrl.query.sort_by in spec.sort_options else 0,
            format_func=_label, key=f"{spec.key}_sort",
        )
        orders = list(_ORDERS)
        changes["sort_order"] = top[2].selectbox(
            "Order", orders, index=orders.index(ctrl.query.sort_order),
            format_func=_ORDERS.get, key=f"{spec.key}_order",
        )

    chosen: Dict[str, str] = {}
    per_row = 3
    for start in range(0, len(spec.filters), per_row):
        chunk = spec.filters[start:start + per_row]
        cols = st.columns(per_row)
        for col, f in zip(cols, chunk):
            current = ctrl.query.filters.get(f.param, ALL)
            chosen[f.param] = _filter_widget(col, f, current, f"{spec.key}_f_{f.param}", stats or {})
    if chosen:
        changes["filters"] = chosen

    def _load():
        # search typing is debounced; wait for the one request it produces
        ctrl.settle()
        ctrl.ensure_loaded()

    if ctrl.apply(**changes) or not ctrl.loaded:
        _run(_load, f"Failed to load {spec.title.lower()}")


# ---------- table ----------

def _table(ctrl: ListController) -> List[Dict[str, Any]]:
    spec = ctrl.spec
    rows = ctrl.view()
    if not rows:
        st.info(f"No {spec.title.lower()} found.")
        return rows
    df = pd.DataFrame(
        [{c: _display(r.get(c)) for c in spec.columns} for r in rows],
        columns=list(spec.columns),
    )
    df.columns = [_label(c) for c in spec.columns]
    event = st.dataframe(
        df, use_container_width=True, hide_index=True,
        on_select="rerun", selection_mode="multi-row", key=f"{spec.key}_table",
    )
    picked = {record_id(rows[i]) for i in event.selection.rows if i < len(rows)}
    ctrl.select_all(False)
    for rid in picked:
        if rid:
            ctrl.select(rid)
    return rows


def _pager(ctrl: ListController):
    spec = ctrl.spec
    left, mid, right = st.columns([1, 2, 1])
    if left.button("◀ Previous", disabled=ctrl.page <= 1, key=f"{spec.key}_prev"):
        _run(lambda: ctrl.go_to(ctrl.page - 1), "Failed to load page")
        st.rerun()
    mid.caption(f"Page {ctrl.page} of {ctrl.total_pages} · {ctrl.total} records")
    if right.button("Next ▶", disabled=ctrl.page >= ctrl.total_pages, key=f"{spec.key}_next"):
        _run(lambda: ctrl.go_to(ctrl.page + 1), "Failed to load page")
        st.rerun()


# ---------- record actions ----------

def _confirm_delete(ctrl: ListController, ids: List[str]):
    spec = ctrl.spec
    state_key = f"{spec.key}_pending_delete"
    answered = {"yes": False}

    def ask(message: str) -> bool:
        st.warning(message)
        yes, no = st.columns(2)
        if no.button("Cancel", key=f"{spec.key}_del_no"):
            st.session_state.pop(state_key, None)
            st.rerun()
        answered["yes"] = yes.button("Yes, delete", type="primary", key=f"{spec.key}_del_yes")
        return answered["yes"]

    def _delete():
        if len(ids) == 1:
            if ctrl.delete(ids[0], ask):
                flash("Record deleted")
            return
        ctrl.select_all(False)
        for rid in ids:
            ctrl.select(rid)
        count = ctrl.delete_selected(ask)
        if count:
            flash(f"Deleted {count} records")

    failed = not _run(_delete, "Failed to delete")
    if answered["yes"] or failed:
        st.session_state.pop(state_key, None)
    if answered["yes"] and not failed:
        st.rerun()


def _record_form(ctrl: ListController, mode: str, record: Optional[Dict[str, Any]]):
    spec = ctrl.spec
    values = form_from_record(spec.form_fields, record or {}) if record else blank_form(spec.form_fields)
    rid = record_id(record) if record else None
    with st.form(f"{spec.key}_{mode}_form"):
        st.subheader(("Edit " if mode == "edit" else "New ") + spec.title.rstrip("s").lower())
        data = render_fields(spec.form_fields, values, key=f"{spec.key}_{mode}_{rid or 'new'}")
        save, cancel = st.columns(2)
        submitted = save.form_submit_button("Save", type="primary")
        cancelled = cancel.form_submit_button("Cancel")
    if cancelled:
        st.session_state.pop(f"{spec.key}_mode", None)
        st.rerun()
    if submitted:
        if mode == "edit":
            ok = _run(lambda: ctrl.update(rid, data), "Failed to update record")
        else:
            ok = _run(lambda: ctrl.create(data), "Failed to create record")
        if ok:
            flash("Saved")
            st.session_state.pop(f"{spec.key}_mode", None)
            st.rerun()


def _record_actions(ctrl: ListController, rows: List[Dict[str, Any]]):
    spec = ctrl.spec
    by_id = {record_id(r): r for r in rows if record_id(r)}
    if not by_id:
        return
    st.markdown("---")
    rid = st.selectbox(
        "Record", list(by_id),
        format_func=lambda i: str(by_id[i].get(spec.label_field) or i), key=f"{spec.key}_pick",
    )
    record = by_id[rid]
    cols = st.columns(4 + len(spec.toggles))
    if cols[0].button("👁 View", key=f"{spec.key}_view"):
        st.session_state[f"{spec.key}_mode"] = ("view", rid)
    if spec.editable and spec.form_fields and cols[1].button("✏️ Edit", key=f"{spec.key}_edit"):
        st.session_state[f"{spec.key}_mode"] = ("edit", rid)
    if cols[2].button("🗑 Delete", key=f"{spec.key}_delete"):
        st.session_state[f"{spec.key}_pending_delete"] = [rid]
    if spec.bulk_delete and ctrl.selected:
        if cols[3].button(f"🗑 Delete selected ({len(ctrl.selected)})", key=f"{spec.key}_bulk"):
            st.session_state[f"{spec.key}_pending_delete"] = sorted(ctrl.selected)
    for i, (label, action) in enumerate(spec.toggles, start=4):
        if cols[i].button(label, key=f"{spec.key}_t_{action}"):
            if _run(lambda a=action: ctrl.toggle(rid, a), f"Failed to {label.lower()}"):
                st.rerun()

    if spec.status_field and spec.status_options:
        current = record.get(spec.status_field)
        options = list(spec.status_options)
        new_status = st.selectbox(
            "Status", options, index=options.index(current) if current in options else 0,
            format_func=_label, key=f"{spec.key}_status_{rid}",
        )
        if new_status != current and st.button("Update status", key=f"{spec.key}_status_btn"):
            if _run(lambda: ctrl.update_status(rid, new_status), "Failed to update status"):
                flash("Status updated")
                st.rerun()

    pending = st.session_state.get(f"{spec.key}_pending_delete")
    if pending:
        _confirm_delete(ctrl, pending)

    mode, target = st.session_state.get(f"{spec.key}_mode") or (None, None)
    if mode == "view" and target in by_id:
        with st.expander("Details", expanded=True):
            st.json(by_id[target])
    elif mode == "edit" and target in by_id:
        _record_form(ctrl, "edit", by_id[target])


def render_resource_page(key: str, icon: str = "", before_table: Optional[Extra] = None):
    show_flashes()
    ctrl = get_controller(key)
    spec: ResourceSpec = ctrl.spec
    st.title(f"{icon} {spec.title}".strip())

    stats = _stats(ctrl) if spec.has_stats else {}
    if before_table is not None:
        before_table(ctrl)

    _filters(ctrl, stats)
    _toolbar(ctrl)

    mode, _target = st.session_state.get(f"{spec.key}_mode") or (None, None)
    if mode == "create":
        _record_form(ctrl, "create", None)

    rows = _table(ctrl)
    if spec.paginated:
        _pager(ctrl)
    _record_actions(ctrl, rows)

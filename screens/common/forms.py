# screens/common/forms.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Mapping

import streamlit as st

from core.resources import FieldDef


def as_date(value: Any):
    if isinstance(value, date):
        return value
    text = str(value or "")[:10]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def render_fields(fields: Iterable[FieldDef], values: Mapping[str, Any], key: str) -> Dict[str, Any]:
    """One widget per FieldDef; call inside an st.form. Returns the raw widget values."""
    out: Dict[str, Any] = {}
    for f in fields:
        label = f"{f.label} *" if f.required else f.label
        wkey = f"{key}_{f.name}"
        value = values.get(f.name)
        if f.kind == "textarea":
            out[f.name] = st.text_area(label, value=str(value or ""), key=wkey)
        elif f.kind == "int":
            out[f.name] = st.number_input(label, value=int(value or 0), step=1, key=wkey)
        elif f.kind == "float":
            out[f.name] = st.number_input(label, value=float(value or 0), step=0.01, format="%.2f", key=wkey)
        elif f.kind == "bool":
            out[f.name] = st.checkbox(label, value=bool(value), key=wkey)
        elif f.kind == "select":
            options = list(f.options)
            if value and value not in options:
                options.append(value)
            index = options.index(value) if value in options else 0
            out[f.name] = st.selectbox(label, options, index=index, key=wkey)
        elif f.kind == "date":
            out[f.name] = st.date_input(label, value=as_date(value), key=wkey)
        elif f.kind == "tags":
            text = ", ".join(value) if isinstance(value, (list, tuple)) else str(value or "")
            out[f.name] = st.text_input(label, value=text, help="Comma separated", key=wkey)
        else:
            out[f.name] = st.text_input(label, value=str(value or ""), key=wkey)
    return out

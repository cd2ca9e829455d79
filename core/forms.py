from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping

from core.errors import ValidationError
from core.resources import FieldDef

def blank_form(fields: Iterable[FieldDef]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields:
        if f.default is not None:
            out[f.name] = f.default
        elif f.kind == "bool":
            out[f.name] = False
        elif f.kind in ("int", "float"):
            out[f.name] = 0
        elif f.kind == "tags":
            out[f.name] = []
        elif f.kind == "select" and f.options:
            out[f.name] = f.options[0]
        else:
            out[f.name] = ""
    return out

def form_from_record(fields: Iterable[FieldDef], record: Mapping[str, Any]) -> Dict[str, Any]:
    fields = list(fields)
    out = blank_form(fields)
    for f in fields:
        if record.get(f.name) is not None:
            out[f.name] = record[f.name]
    return out

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False

def validate_required(fields: Iterable[FieldDef], data: Mapping[str, Any]) -> None:
    missing = [f.label for f in fields if f.required and _is_blank(data.get(f.name))]
    if missing:
        raise ValidationError(missing)

def clean_form(fields: Iterable[FieldDef], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize widget values into the JSON shape the backend stores."""
    out: Dict[str, Any] = {}
    for f in fields:
        if f.name not in data:
            continue
        value = data[f.name]
        if f.kind == "tags" and isinstance(value, str):
            value = [t.strip() for t in value.split(",") if t.strip()]
        elif f.kind == "date" and hasattr(value, "isoformat"):
            value = value.isoformat()
        elif f.kind in ("text", "textarea", "select", "date") and isinstance(value, str):
            value = value.strip()
        elif f.kind == "int":
            value = int(value or 0)
        elif f.kind == "float":
            value = float(value or 0)
        elif f.kind == "bool":
            value = bool(value)
        out[f.name] = value
    return out

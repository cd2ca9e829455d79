# core/csv_export.py
from __future__ import annotations

import csv
from datetime import date
from typing import Any, Dict, Iterable, Optional, Sequence

import pandas as pd


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return value.get("name") or value.get("email") or ""
    return value


def records_to_csv(records: Iterable[Dict[str, Any]], columns: Sequence[str],
                   headers: Optional[Sequence[str]] = None) -> bytes:
    """Loaded rows as CSV with every cell quoted. `headers` relabels `columns`."""
    rows = [{c: _cell(r.get(c)) for c in columns} for r in records]
    df = pd.DataFrame(rows, columns=list(columns))
    if headers:
        df.columns = list(headers)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL).encode("utf-8")


def generate_filename(prefix: str, ext: str = "csv", today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.{ext}"

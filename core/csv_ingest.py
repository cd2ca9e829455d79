# core/csv_ingest.py
# -------------------------------------------------------------------
# Client-side CSV preview for bulk result uploads.
# The backend re-parses the uploaded file and is authoritative; this
# only shows the admin what is about to be imported.
# -------------------------------------------------------------------
from __future__ import annotations

import io
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Union

import pandas as pd

from core.errors import CsvParseError
from core.result_columns import ResultFormat

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 10

CsvSource = Union[bytes, bytearray, str, BinaryIO]


@dataclass
class ParseReport:
    rows: List[Dict[str, Any]]
    total_rows: int = 0
    dropped_rows: int = 0
    missing_headers: List[str] = field(default_factory=list)
    unknown_headers: List[str] = field(default_factory=list)

    @property
    def parsed_count(self) -> int:
        return len(self.rows)

    def summary(self) -> str:
        msg = f"CSV parsed successfully. Found {self.parsed_count} records."
        if self.dropped_rows:
            msg += f" {self.dropped_rows} row(s) skipped: missing roll number or student name."
        return msg


def check_csv_name(name: str) -> None:
    """Extension check only; the content is not sniffed."""
    if not name or not name.strip().lower().endswith(".csv"):
        raise CsvParseError("Please select a CSV file")


def read_csv_frame(source: CsvSource) -> pd.DataFrame:
    """
    Header row required, blank lines skipped, every cell read as text.

    The header decides the column count. A trailing delimiter on every
    row (Excel exports) is not an index column, and a row with more
    fields than the header keeps its first fields; the rest are logged
    and ignored.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            df = pd.read_csv(
                source,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding="utf-8-sig",
                index_col=False,
                engine="python",
            )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        logger.error("CSV parse failed: %s", e)
        raise CsvParseError("Failed to parse CSV file") from e
    for w in caught:
        if issubclass(w.category, pd.errors.ParserWarning):
            logger.warning("CSV rows wider than the header were truncated: %s", w.message)
    df.columns = [str(c).strip() for c in df.columns]
    # short rows come back as NA
    return df.fillna("")


def parse_results_csv(source: CsvSource, fmt: ResultFormat) -> ParseReport:
    """
    Map each CSV row onto the format's record fields.

    Unknown headers are ignored, missing ones take the column default,
    numeric cells that don't parse become 0, and rows without a roll
    number or student name are dropped.
    """
    df = read_csv_frame(source)
    present = set(df.columns)

    rows: List[Dict[str, Any]] = []
    dropped = 0
    for raw in df.to_dict(orient="records"):
        record = fmt.map_row(raw)
        if fmt.is_complete(record):
            rows.append(record)
        else:
            dropped += 1

    missing = [
        c.header for c in fmt.columns
        if not any(h in present for h in (c.header,) + c.fallback_headers)
    ]
    unknown = [h for h in df.columns if h not in fmt.known_headers]

    report = ParseReport(
        rows=rows,
        total_rows=len(df.index),
        dropped_rows=dropped,
        missing_headers=missing,
        unknown_headers=unknown,
    )
    logger.info("%s CSV: %d rows read, %d kept, %d dropped",
                fmt.key, report.total_rows, report.parsed_count, report.dropped_rows)
    return report


def preview_frame(rows: List[Dict[str, Any]], fmt: ResultFormat, limit: int = PREVIEW_ROWS) -> pd.DataFrame:
    columns = ["Roll No", "Student Name", "Test Name", "Total Marks", "Marks %"]
    head = rows[:max(0, limit)]
    return pd.DataFrame(
        [
            {
                "Roll No": r.get("rollNo", ""),
                "Student Name": r.get("studentName", ""),
                "Test Name": r.get(fmt.test_field, ""),
                "Total Marks": r.get("totalMarks", 0.0),
                "Marks %": f"{float(r.get('marksPercentage') or 0):.2f}%",
            }
            for r in head
        ],
        columns=columns,
    )


def template_csv(fmt: ResultFormat) -> bytes:
    """Header-only sample file for the "download template" link."""
    return pd.DataFrame(columns=fmt.headers).to_csv(index=False).encode("utf-8")

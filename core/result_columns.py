# core/result_columns.py
# -------------------------------------------------------------------
# Column contract for bulk result CSVs.
# One ColumnSpec per CSV header: which record field it fills, how the
# cell is coerced, and what it defaults to. The CSV preview parser, the
# sample template, header checks and the manual entry/edit forms all
# read from here so they cannot drift apart.
# -------------------------------------------------------------------
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

_INT_RE = re.compile(r"^[+-]?\d+")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _numeric_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and math.isnan(raw):
        return ""
    # leading-number semantics, same as the backend: "1,200" reads as 1
    return str(raw).strip()


def to_int(raw: Any) -> int:
    """Leading integer of the cell, 0 when there is none."""
    text = _numeric_text(raw)
    m = _FLOAT_RE.match(text)
    if not m:
        return 0
    try:
        value = float(m.group(0))
    except ValueError:
        return 0
    if not math.isfinite(value):
        return 0
    int_part = _INT_RE.match(m.group(0))
    return int(int_part.group(0)) if int_part else int(value)


def to_float(raw: Any) -> float:
    """Leading decimal number of the cell, 0.0 when there is none."""
    m = _FLOAT_RE.match(_numeric_text(raw))
    if not m:
        return 0.0
    value = float(m.group(0))
    return value if math.isfinite(value) else 0.0


def to_str(raw: Any) -> str:
    if raw is None or (isinstance(raw, float) and math.isnan(raw)):
        return ""
    return str(raw).strip()


_COERCERS = {"int": to_int, "float": to_float, "str": to_str}


@dataclass(frozen=True)
class ColumnSpec:
    header: str
    field: str
    kind: str = "int"  # str | int | float
    label: Optional[str] = None
    fallback_headers: Tuple[str, ...] = ()
    identity: bool = False

    @property
    def default(self) -> Any:
        return {"str": "", "int": 0, "float": 0.0}[self.kind]

    @property
    def display_label(self) -> str:
        return self.label or self.header

    def coerce(self, raw: Any) -> Any:
        return _COERCERS[self.kind](raw)

    def read(self, row: Dict[str, Any]) -> Any:
        """Value for this column from a header->cell mapping, with fallbacks."""
        for header in (self.header,) + self.fallback_headers:
            if header in row and to_str(row[header]) != "":
                return self.coerce(row[header])
        return self.default


@dataclass(frozen=True)
class ResultFormat:
    key: str
    title: str
    columns: Tuple[ColumnSpec, ...]
    test_field: str            # field shown as "test name" in previews
    sends_uploader: bool       # multipart upload carries `uploadedBy`

    @property
    def headers(self) -> List[str]:
        return [c.header for c in self.columns]

    @property
    def known_headers(self) -> set:
        out = set()
        for c in self.columns:
            out.add(c.header)
            out.update(c.fallback_headers)
        return out

    @property
    def identity_fields(self) -> List[str]:
        return [c.field for c in self.columns if c.identity]

    def map_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {c.field: c.read(row) for c in self.columns}

    def is_complete(self, record: Dict[str, Any]) -> bool:
        return all(to_str(record.get(f)) for f in self.identity_fields)


def _i(header: str, field: str, label: Optional[str] = None) -> ColumnSpec:
    return ColumnSpec(header, field, "int", label)


def _f(header: str, field: str, label: Optional[str] = None, fallback: Tuple[str, ...] = ()) -> ColumnSpec:
    return ColumnSpec(header, field, "float", label, fallback)


def _s(header: str, field: str, label: Optional[str] = None, identity: bool = False) -> ColumnSpec:
    return ColumnSpec(header, field, "str", label, identity=identity)


RESULT_COLUMNS: Tuple[ColumnSpec, ...] = (
    _s("COURSE", "course", "Course"),
    _s("TEST DATE", "testDate", "Test date"),
    _i("RANK", "rank", "Rank"),
    _s("ROLL NO", "rollNo", "Roll no", identity=True),
    _s("STUDENT NAME", "studentName", "Student name", identity=True),
    _i("TQ", "tq", "Total questions"),
    _i("TA", "ta", "Total attempted"),
    _i("TR", "tr", "Total right"),
    _i("TW", "tw", "Total wrong"),
    _i("TL", "tl", "Total left"),
    _i("PR", "pr", "Physics right"),
    _i("PW", "pw", "Physics wrong"),
    _i("CR", "cr", "Chemistry right"),
    _i("CW", "cw", "Chemistry wrong"),
    _i("BR", "br", "Biology right"),
    _i("BW", "bw", "Biology wrong"),
    _i("ZR", "zr", "Zoology right"),
    _i("ZW", "zw", "Zoology wrong"),
    _f("Total MARKS", "totalMarks", "Total marks", fallback=("TOTAL MARKS", "T MARKS")),
    _f("MARKS%", "marksPercentage", "Marks %"),
    _f("W%", "wPercentage", "Wrong %"),
    _f("PERCENTILE", "percentile", "Percentile"),
    _s("BATCH", "batch", "Batch"),
    _s("BRANCH", "branch", "Branch"),
    _s("TEST TYPE", "testType", "Test type"),
    _s("EXAM ID", "examId", "Exam id"),
    _i("BATCH YEAR", "batchYear", "Batch year"),
    _s("BATCH CODE", "batchCode", "Batch code"),
    _i("TOTAL STUDENTS", "totalStudents", "Total students"),
    _s("TEST CENTER", "testCenter", "Test center"),
)

GAET_RESULT_COLUMNS: Tuple[ColumnSpec, ...] = (
    _s("ROLL NO", "rollNo", "Roll no", identity=True),
    _s("STUDENT NAME", "studentName", "Student name", identity=True),
    _s("TEST NAME", "testName", "Test name"),
    _i("TQ", "tq", "Total questions"),
    _i("TR", "tr", "Total right"),
    _i("TW", "tw", "Total wrong"),
    _i("TL", "tl", "Total left"),
    _i("PR", "pr", "Physics right"),
    _i("PW", "pw", "Physics wrong"),
    _i("CR", "cr", "Chemistry right"),
    _i("CW", "cw", "Chemistry wrong"),
    _i("MR", "mr", "Maths right"),
    _i("MW", "mw", "Maths wrong"),
    _i("BR", "br", "Biology right"),
    _i("BW", "bw", "Biology wrong"),
    _i("GKR", "gkr", "GK right"),
    _i("GKW", "gkw", "GK wrong"),
    _f("T MARKS", "totalMarks", "Total marks"),
    _f("MARKS%", "marksPercentage", "Marks %"),
    _s("SCH", "scholarship", "Scholarship"),
    _s("SPL DISC", "specialDiscount", "Special discount"),
    _f("TOTAL FEE(ONE TIME)", "totalFeeOneTime", "Total fee (one time)"),
    _f("SCH AMOUNT", "scholarshipAmount", "Scholarship amount"),
    _f("TOTAL FEE (INS)", "totalFeeInstallment", "Total fee (installments)"),
    # older sheets repeat "SCH AMOUNT" for the installment column; pandas reads
    # the second occurrence as "SCH AMOUNT.1"
    _f("SCH AMOUNT (INS)", "scholarshipAmountInstallment", "Scholarship amount (installments)",
       fallback=("SCH AMOUNT.1", "SCH AMOUNT")),
    _s("TEST DATE", "testDate", "Test date"),
    _s("TEST CENTER", "testCenter", "Test center"),
    _s("REMARKS", "remarks", "Remarks"),
)

RESULT_FORMAT = ResultFormat(
    key="result", title="Results", columns=RESULT_COLUMNS,
    test_field="course", sends_uploader=True,
)

GAET_RESULT_FORMAT = ResultFormat(
    key="gaet_results", title="GAET Results", columns=GAET_RESULT_COLUMNS,
    test_field="testName", sends_uploader=False,
)

# core/resources.py
# -------------------------------------------------------------------
# Declarative description of every backend resource the dashboard
# manages, and a generic REST wrapper (ResourceApi) driven by it.
# Screens never hard-code endpoint paths; they read them from here.
# -------------------------------------------------------------------
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.api_client import ApiClient
from core.result_columns import GAET_RESULT_FORMAT, RESULT_FORMAT, ResultFormat

logger = logging.getLogger(__name__)

ALL = "all"  # sentinel option meaning "no filter"


@dataclass(frozen=True)
class FilterDef:
    param: str
    label: str
    options: Tuple[str, ...] = (ALL,)
    # option -> query params, for filters that don't map 1:1 onto one param
    value_map: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    kind: str = "select"  # select | text | int | date
    options_from: Optional[str] = None  # stats key holding the option list

    def to_params(self, value: Optional[str]) -> Dict[str, Any]:
        if isinstance(value, str):
            value = value.strip()
        if value in (None, "", ALL):
            return {}
        if self.kind == "int":
            return {self.param: int(value)} if str(value).isdigit() else {}
        if value in self.value_map:
            return dict(self.value_map[value])
        return {self.param: value}

    def options_for(self, stats: Optional[Mapping[str, Any]] = None) -> Tuple[str, ...]:
        """Static options, or "all" plus the values the stats payload lists."""
        if not self.options_from:
            return self.options
        values = (stats or {}).get(self.options_from) or []
        if not isinstance(values, list):
            return (ALL,)
        return (ALL,) + tuple(str(v) for v in values if v not in (None, ""))


@dataclass(frozen=True)
class FieldDef:
    name: str
    label: str
    kind: str = "text"  # text | textarea | int | float | bool | select | date | tags
    required: bool = False
    options: Tuple[str, ...] = ()
    default: Any = None


@dataclass(frozen=True)
class ResourceSpec:
    key: str
    title: str
    path: str
    list_keys: Tuple[str, ...]
    columns: Tuple[str, ...]
    filters: Tuple[FilterDef, ...] = ()
    form_fields: Tuple[FieldDef, ...] = ()
    search_fields: Tuple[str, ...] = ()
    server_search: bool = True       # backend honours ?search=
    paginated: bool = True           # backend honours ?page=&limit=
    fetch_limit: Optional[int] = None  # fixed limit for unpaginated lists
    creatable: bool = True
    editable: bool = True
    bulk_delete: bool = False
    status_field: Optional[str] = None
    status_options: Tuple[str, ...] = ()
    status_patch: bool = False       # PATCH <path>/<id>/status instead of PUT
    toggles: Tuple[Tuple[str, str], ...] = ()  # (label, action path suffix)
    has_stats: bool = False
    csv_download: bool = False
    csv_upload: bool = False
    sort_options: Tuple[str, ...] = ()
    label_field: str = "title"


@dataclass
class Page:
    records: List[Dict[str, Any]]
    page: int = 1
    total_pages: int = 1
    total: int = 0


def _dig(body: Any) -> Dict[str, Any]:
    """Unwrap `{success, data: {...}}` and the occasional `data.data` nesting."""
    data = body.get("data", body) if isinstance(body, dict) else {}
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    return data if isinstance(data, dict) else {}


def parse_page(body: Any, list_keys: Sequence[str], fallback_page: int = 1) -> Page:
    """Normalize the list envelopes the backend uses into a Page."""
    data = _dig(body)
    records: List[Dict[str, Any]] = []
    raw_data = body.get("data") if isinstance(body, dict) else None
    if isinstance(raw_data, list):
        records = raw_data
    else:
        for key in tuple(list_keys) + ("results", "data", "items"):
            value = data.get(key)
            if isinstance(value, list):
                records = value
                break

    pagination = data.get("pagination") or {}
    total = pagination.get("total")
    if total is None:
        total = data.get("total", len(records))
    total_pages = pagination.get("totalPages") or pagination.get("pages") or 1
    page = pagination.get("page") or pagination.get("currentPage") or fallback_page
    return Page(records=list(records), page=int(page), total_pages=max(1, int(total_pages)), total=int(total or 0))


def record_id(record: Mapping[str, Any]) -> Optional[str]:
    rid = record.get("_id") or record.get("id")
    return str(rid) if rid is not None else None


class ResourceApi:
    """CRUD calls for one ResourceSpec. Returns parsed bodies; raises ApiError."""

    def __init__(self, client: ApiClient, spec: ResourceSpec):
        self.client = client
        self.spec = spec

    def _item(self, rid: str, suffix: str = "") -> str:
        path = f"{self.spec.path}/{rid}"
        return f"{path}/{suffix}" if suffix else path

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Page:
        params = dict(params or {})
        body = self.client.get(self.spec.path, params=params)
        return parse_page(body, self.spec.list_keys, fallback_page=int(params.get("page") or 1))

    def get(self, rid: str) -> Dict[str, Any]:
        return _dig(self.client.get(self._item(rid)))

    def create(self, data: Mapping[str, Any]) -> Any:
        return self.client.post(self.spec.path, json=dict(data))

    def update(self, rid: str, data: Mapping[str, Any]) -> Any:
        return self.client.put(self._item(rid), json=dict(data))

    def update_status(self, rid: str, status: str) -> Any:
        if self.spec.status_patch:
            return self.client.patch(self._item(rid, "status"), json={"status": status})
        return self.client.put(self._item(rid), json={"status": status})

    def toggle(self, rid: str, action: str) -> Any:
        return self.client.patch(self._item(rid, action))

    def delete(self, rid: str) -> Any:
        return self.client.delete(self._item(rid))

    def delete_many(self, ids: Sequence[str]) -> int:
        body = self.client.delete(f"{self.spec.path}/multiple", json={"ids": list(ids)})
        data = _dig(body)
        return int(data["deletedCount"]) if data.get("deletedCount") is not None else len(ids)

    def stats(self) -> Dict[str, Any]:
        return _dig(self.client.get(f"{self.spec.path}/stats"))

    def download_csv(self, params: Optional[Mapping[str, Any]] = None) -> bytes:
        return self.client.download(f"{self.spec.path}/download-csv", params=params)

    def upload_csv(self, file_name: str, content: bytes, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        files = {"csvFile": (file_name, content, "text/csv")}
        body = self.client.upload(f"{self.spec.path}/upload-csv", files=files, data=dict(extra or {}))
        return _dig(body)


# -------------------------------------------------------------------
# Resource catalogue
# -------------------------------------------------------------------

_ACTIVE_FILTER = FilterDef(
    "isActive", "Status", (ALL, "active", "inactive"),
    value_map={"active": {"isActive": True}, "inactive": {"isActive": False}},
)

ENQUIRY = ResourceSpec(
    key="enquiry", title="Enquiry Forms", path="/enquiry",
    list_keys=("enquiries",),
    columns=("name", "phone", "email", "course", "state", "district", "status", "createdAt"),
    filters=(FilterDef("status", "Status", (ALL, "pending", "contacted", "resolved", "closed")),),
    form_fields=(
        FieldDef("name", "Name", required=True),
        FieldDef("phone", "Phone", required=True),
        FieldDef("email", "Email"),
        FieldDef("studying", "Studying"),
        FieldDef("course", "Course"),
        FieldDef("state", "State"),
        FieldDef("district", "District"),
        FieldDef("address", "Address", "textarea"),
        FieldDef("query", "Query", "textarea"),
        FieldDef("status", "Status", "select", options=("pending", "contacted", "resolved", "closed")),
    ),
    fetch_limit=100, paginated=False, creatable=False,
    status_field="status", status_options=("pending", "contacted", "resolved", "closed"),
    has_stats=True, csv_download=True, label_field="name",
)

COMPLAINT_FEEDBACK = ResourceSpec(
    key="complaint_feedback", title="Complaints & Feedback", path="/complaint-feedback",
    list_keys=("complaintsFeedback",),
    columns=("name", "type", "department", "phone", "email", "rollNo", "status", "createdAt"),
    filters=(
        FilterDef("type", "Type", (ALL, "complaint", "feedback", "suggestion")),
        FilterDef("status", "Status", (ALL, "pending", "in_review", "resolved", "closed")),
    ),
    form_fields=(
        FieldDef("status", "Status", "select", options=("pending", "in_review", "resolved", "closed")),
        FieldDef("type", "Type", "select", options=("complaint", "feedback", "suggestion")),
        FieldDef("department", "Department"),
        FieldDef("message", "Message", "textarea"),
    ),
    creatable=False,
    status_field="status", status_options=("pending", "in_review", "resolved", "closed"),
    has_stats=True, csv_download=True, label_field="name",
)

ADMISSION_FORM = ResourceSpec(
    key="admission_form", title="Admission Forms", path="/admission-form",
    list_keys=("admissionForms",),
    columns=("applicationNo", "name", "email", "phone", "gender", "dateOfBirth",
             "classSeekingAdmission", "previousClass", "previousSchool", "status", "createdAt"),
    filters=(
        FilterDef("status", "Status", (ALL, "pending", "under_review", "approved", "rejected", "admitted")),
    ),
    creatable=False, editable=False,
    status_field="status", status_options=("pending", "under_review", "approved", "rejected", "admitted"),
    status_patch=True, label_field="name",
)

BANNER = ResourceSpec(
    key="banner", title="Banner Management", path="/banner",
    list_keys=("banners",),
    columns=("title", "position", "isActive", "priority", "clicks", "impressions", "createdAt"),
    filters=(
        FilterDef("position", "Position", (ALL, "hero", "sidebar", "footer", "popup")),
        _ACTIVE_FILTER,
    ),
    form_fields=(
        FieldDef("title", "Title", required=True),
        FieldDef("description", "Description", "textarea"),
        FieldDef("imageUrl", "Image URL", required=True),
        FieldDef("imageAlt", "Image alt text", required=True),
        FieldDef("mobileImageUrl", "Mobile image URL"),
        FieldDef("mobileImageAlt", "Mobile image alt text"),
        FieldDef("linkUrl", "Link URL"),
        FieldDef("position", "Position", "select", options=("hero", "sidebar", "footer", "popup"), default="hero"),
        FieldDef("priority", "Priority", "int", default=0),
        FieldDef("isActive", "Active", "bool", default=True),
        FieldDef("targetAudience", "Target audience", "tags"),
    ),
    toggles=(("Toggle active", "toggle-status"),),
    has_stats=True,
)

BLOG = ResourceSpec(
    key="blog", title="Blogs", path="/blog",
    list_keys=("blogs",),
    columns=("title", "author", "category", "isPublished", "isFeatured", "views", "publishDate"),
    filters=(
        FilterDef("category", "Category", (ALL, "education", "career", "technology", "lifestyle", "general")),
        FilterDef("status", "Status", (ALL, "published", "draft", "featured"), value_map={
            "published": {"isPublished": True},
            "draft": {"isPublished": False},
            "featured": {"isFeatured": True},
        }),
    ),
    form_fields=(
        FieldDef("title", "Title", required=True),
        FieldDef("author", "Author", required=True),
        FieldDef("category", "Category", "select",
                 options=("education", "career", "technology", "lifestyle", "general"), default="general"),
        FieldDef("excerpt", "Excerpt", "textarea"),
        FieldDef("content", "Content", "textarea", required=True),
        FieldDef("featuredImage", "Featured image URL"),
        FieldDef("imageAlt", "Image alt text"),
        FieldDef("tags", "Tags", "tags"),
        FieldDef("metaTitle", "Meta title"),
        FieldDef("metaDescription", "Meta description", "textarea"),
        FieldDef("isPublished", "Published", "bool", default=False),
        FieldDef("isFeatured", "Featured", "bool", default=False),
    ),
    toggles=(("Toggle publish", "toggle-publish"), ("Toggle featured", "toggle-featured")),
    has_stats=True,
)

NEWS_EVENT = ResourceSpec(
    key="news_events", title="News & Events", path="/news-events",
    list_keys=("newsEvents",),
    columns=("title", "type", "publishDate", "publishTime", "location", "createdAt"),
    filters=(FilterDef("type", "Type", (ALL, "news", "event", "announcement")),),
    form_fields=(
        FieldDef("title", "Title", required=True),
        FieldDef("content", "Content", "textarea", required=True),
        FieldDef("type", "Type", "select", options=("news", "event", "announcement"), default="news"),
        FieldDef("publishDate", "Publish date", "date"),
        FieldDef("publishTime", "Publish time"),
        FieldDef("location", "Location"),
        FieldDef("tags", "Tags", "tags"),
    ),
    sort_options=("createdAt", "publishDate", "title"),
    has_stats=True,
)

PUBLIC_NOTICE = ResourceSpec(
    key="public_notice", title="Public Notices", path="/public-notice",
    list_keys=("notices",),
    columns=("title", "category", "priority", "publishDate", "isActive", "isPublished"),
    filters=(
        FilterDef("category", "Category", (ALL, "exam", "admission", "general", "academic", "other")),
        FilterDef("priority", "Priority", (ALL, "low", "medium", "high")),
        _ACTIVE_FILTER,
    ),
    form_fields=(
        FieldDef("title", "Title", required=True),
        FieldDef("description", "Description", "textarea", required=True),
        FieldDef("publishDate", "Publish date", "date", required=True),
        FieldDef("downloadLink", "Download link"),
        FieldDef("category", "Category", "select",
                 options=("exam", "admission", "general", "academic", "other"), default="general"),
        FieldDef("priority", "Priority", "select", options=("low", "medium", "high"), default="medium"),
        FieldDef("tags", "Tags", "tags"),
        FieldDef("isActive", "Active", "bool", default=True),
        FieldDef("isPublished", "Published", "bool", default=True),
    ),
    sort_options=("publishDate", "createdAt", "priority"),
    has_stats=True,
)

COURSE = ResourceSpec(
    key="courses", title="Courses", path="/courses",
    list_keys=("courses",),
    columns=("title", "category", "order", "isActive", "updatedAt"),
    filters=(
        FilterDef("category", "Category",
                  (ALL, "Medical Courses", "Engineering Courses", "Pre-Foundation Course")),
    ),
    form_fields=(
        FieldDef("title", "Title", required=True),
        FieldDef("description", "Description", "textarea", required=True),
        FieldDef("category", "Category", "select",
                 options=("Medical Courses", "Engineering Courses", "Pre-Foundation Course"),
                 default="Medical Courses"),
        FieldDef("icon", "Icon"),
        FieldDef("order", "Order", "int", default=0),
        FieldDef("isActive", "Active", "bool", default=True),
    ),
    search_fields=("title", "description", "category"),
    server_search=False, paginated=False,
)

GAET_DATE = ResourceSpec(
    key="gaet_dates", title="GAET Dates", path="/gaet-dates",
    list_keys=("dates",),
    columns=("date", "mode", "isActive", "updatedAt"),
    form_fields=(
        FieldDef("date", "Date", required=True),
        FieldDef("mode", "Mode", required=True),
        FieldDef("isActive", "Active", "bool", default=True),
    ),
    search_fields=("date", "mode"),
    server_search=False, paginated=False, label_field="date",
)

_VIDEO_FIELDS = (
    FieldDef("testName", "Test name", required=True),
    FieldDef("subject", "Subject", required=True),
    FieldDef("videoLink", "Video link", required=True),
    FieldDef("order", "Order", "int", default=0),
    FieldDef("isActive", "Active", "bool", default=True),
)

AITS_VIDEO_SOLUTION = ResourceSpec(
    key="aits_video_solutions", title="AITS Video Solutions", path="/aits-video-solutions",
    list_keys=("solutions",),
    columns=("testName", "subject", "videoLink", "order", "isActive"),
    form_fields=_VIDEO_FIELDS,
    search_fields=("testName", "subject", "videoLink"),
    server_search=False, paginated=False,
    sort_options=("testName", "subject", "order"), label_field="testName",
)

SPOT_TEST_VIDEO_SOLUTION = ResourceSpec(
    key="spot_test_video_solutions", title="Spot Test Video Solutions", path="/spot-test-video-solutions",
    list_keys=("solutions",),
    columns=("testName", "subject", "videoLink", "order", "isActive"),
    form_fields=_VIDEO_FIELDS,
    search_fields=("testName", "subject", "videoLink"),
    server_search=False, paginated=False,
    sort_options=("testName", "subject", "order"), label_field="testName",
)

GVET_ANSWER_KEY = ResourceSpec(
    key="gvet_answer_keys", title="GVET Answer Keys", path="/gvet/answer-key",
    list_keys=("submissions",),
    columns=("name", "rollNo", "phone", "questionNo", "explanation", "createdAt"),
    creatable=False, editable=False, label_field="name",
)

def _result_fields(fmt: ResultFormat) -> Tuple[FieldDef, ...]:
    kinds = {"str": "text", "int": "int", "float": "float"}
    return tuple(
        FieldDef(c.field, c.display_label, kinds[c.kind], required=c.identity, default=c.default)
        for c in fmt.columns
    )


RESULT = ResourceSpec(
    key="result", title="Results", path="/result",
    list_keys=("results",),
    columns=("rollNo", "studentName", "course", "testDate", "rank", "totalMarks",
             "marksPercentage", "percentile", "batch", "branch"),
    filters=(
        FilterDef("testType", "Test type", (ALL, "CLASSROOM_TEST", "SURPRISE_TEST", "MOCK_TEST", "FINAL_TEST")),
        FilterDef("course", "Course", options_from="courses"),
        FilterDef("batch", "Batch", options_from="batches"),
        FilterDef("branch", "Branch", kind="text"),
        FilterDef("testDate", "Test date", kind="date"),
        FilterDef("batchYear", "Batch year", kind="int"),
    ),
    form_fields=_result_fields(RESULT_FORMAT),
    bulk_delete=True, has_stats=True, csv_upload=True,
    sort_options=("testDate", "rank", "totalMarks", "percentile", "studentName"),
    label_field="studentName",
)

GAET_RESULT = ResourceSpec(
    key="gaet_results", title="GAET Results", path="/gaet-results",
    list_keys=("results",),
    columns=("rollNo", "studentName", "testName", "totalMarks", "marksPercentage",
             "scholarship", "testDate", "testCenter"),
    form_fields=_result_fields(GAET_RESULT_FORMAT),
    search_fields=("rollNo", "studentName", "testName", "testCenter"),
    server_search=False, paginated=False, fetch_limit=1000,
    bulk_delete=True, csv_upload=True, label_field="studentName",
)

RESOURCES: Dict[str, ResourceSpec] = {
    spec.key: spec for spec in (
        ENQUIRY, COMPLAINT_FEEDBACK, ADMISSION_FORM, BANNER, BLOG, NEWS_EVENT,
        PUBLIC_NOTICE, COURSE, GAET_DATE, AITS_VIDEO_SOLUTION, SPOT_TEST_VIDEO_SOLUTION,
        GVET_ANSWER_KEY, RESULT, GAET_RESULT,
    )
}

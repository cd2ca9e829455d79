# core/list_controller.py
# -------------------------------------------------------------------
# List-fetch-filter-paginate state for one resource screen.
# - search/filter changes are debounced into a single list request
# - every mutation re-fetches the current page from the backend
# - deletes go through a caller-supplied confirm(message) gate
# -------------------------------------------------------------------
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from core.debounce import Debouncer
from core.forms import clean_form, validate_required
from core.resources import ALL, Page, ResourceApi, ResourceSpec, record_id

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

_RESET_PAGE_ON = {"search", "filters", "limit", "sort_by", "sort_order"}


@dataclass(frozen=True)
class ListQuery:
    page: int = 1
    limit: int = 10
    search: str = ""
    filters: Mapping[str, str] = field(default_factory=dict)
    sort_by: Optional[str] = None
    sort_order: str = "desc"


def build_params(spec: ResourceSpec, query: ListQuery) -> Dict[str, Any]:
    """Query string for a list request. "all" filters and blank search are left out."""
    params: Dict[str, Any] = {}
    if spec.paginated:
        params["page"] = query.page
        params["limit"] = query.limit
    elif spec.fetch_limit:
        params["page"] = 1
        params["limit"] = spec.fetch_limit
    if spec.server_search and query.search.strip():
        params["search"] = query.search.strip()
    if spec.server_search:
        for f in spec.filters:
            params.update(f.to_params(query.filters.get(f.param)))
    if spec.server_search and query.sort_by:
        params["sortBy"] = query.sort_by
        params["sortOrder"] = query.sort_order
    return params


def _sort_key(value: Any):
    # None/"" sort last regardless of direction handled by caller
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value).lower())


class ListController:
    def __init__(self, api: ResourceApi, limit: int = 10, debounce_seconds: float = 0.3):
        self.api = api
        self.spec: ResourceSpec = api.spec
        self.query = ListQuery(limit=limit)
        self.records: List[Dict[str, Any]] = []
        self.page = 1
        self.total_pages = 1
        self.total = 0
        self.loaded = False
        self.selected: Set[str] = set()
        self._lock = threading.RLock()
        self._debouncer = Debouncer(debounce_seconds, self.refresh)

    # ---------- fetching ----------

    def params(self) -> Dict[str, Any]:
        return build_params(self.spec, self.query)

    def refresh(self) -> Page:
        """One list request with the current query. On failure state is left as it was."""
        params = self.params()
        page = self.api.list(params)
        with self._lock:
            self.records = page.records
            self.page = page.page
            self.total_pages = page.total_pages
            self.total = page.total if self.spec.paginated else max(page.total, len(page.records))
            present = {record_id(r) for r in self.records}
            self.selected &= present
            self.loaded = True
        logger.debug("%s: fetched %d records (page %s/%s)",
                     self.spec.key, len(page.records), page.page, page.total_pages)
        return page

    def apply(self, **changes: Any) -> bool:
        """
        Update search/filters/sort and schedule a debounced refresh.
        Returns True when the query actually changed.
        """
        with self._lock:
            updates: Dict[str, Any] = {}
            for key, value in changes.items():
                if key == "filters":
                    value = {**self.query.filters, **(value or {})}
                if getattr(self.query, key) != value:
                    updates[key] = value
            if not updates:
                return False
            if _RESET_PAGE_ON & updates.keys():
                updates["page"] = 1
            self.query = replace(self.query, **updates)
        self._debouncer.trigger()
        return True

    def settle(self, timeout: Optional[float] = None) -> bool:
        """Wait for a pending debounced refresh; re-raises its ApiError."""
        return self._debouncer.wait(timeout)

    def flush(self) -> None:
        self._debouncer.flush()

    def ensure_loaded(self) -> None:
        if not self.loaded and not self._debouncer.pending:
            self.refresh()

    def go_to(self, page: int) -> Page:
        page = max(1, min(int(page), self.total_pages or 1))
        with self._lock:
            self.query = replace(self.query, page=page)
        self._debouncer.cancel()
        return self.refresh()

    # ---------- client-side view ----------

    def visible(self, sort_by: Optional[str] = None, descending: bool = False) -> List[Dict[str, Any]]:
        """
        Records to render. Resources whose backend already searches and
        filters are shown as returned; the rest are filtered here.
        """
        rows = list(self.records)
        if not self.spec.server_search:
            needle = self.query.search.strip().lower()
            if needle and self.spec.search_fields:
                rows = [
                    r for r in rows
                    if any(needle in str(r.get(f) or "").lower() for f in self.spec.search_fields)
                ]
            for f in self.spec.filters:
                value = self.query.filters.get(f.param)
                if value in (None, "", ALL):
                    continue
                wanted = f.to_params(value)
                rows = [r for r in rows if all(r.get(k) == v for k, v in wanted.items())]
        if sort_by:
            present = [r for r in rows if r.get(sort_by) not in (None, "")]
            missing = [r for r in rows if r.get(sort_by) in (None, "")]
            present.sort(key=lambda r: _sort_key(r.get(sort_by)), reverse=descending)
            rows = present + missing
        return rows

    def view(self) -> List[Dict[str, Any]]:
        """visible() ordered by the query; backend-sorted lists keep their order."""
        if self.spec.server_search:
            return self.visible()
        return self.visible(sort_by=self.query.sort_by, descending=self.query.sort_order == "desc")

    # ---------- selection ----------

    def select(self, rid: str, checked: bool = True) -> None:
        with self._lock:
            if checked:
                self.selected.add(rid)
            else:
                self.selected.discard(rid)

    def select_all(self, checked: bool = True) -> None:
        with self._lock:
            if checked:
                self.selected = {rid for rid in (record_id(r) for r in self.visible()) if rid}
            else:
                self.selected = set()

    # ---------- mutations (always followed by a re-fetch) ----------

    def create(self, data: Mapping[str, Any]) -> Any:
        validate_required(self.spec.form_fields, data)
        body = self.api.create(clean_form(self.spec.form_fields, data))
        logger.info("%s: created record", self.spec.key)
        self.refresh()
        return body

    def update(self, rid: str, data: Mapping[str, Any]) -> Any:
        validate_required(self.spec.form_fields, data)
        body = self.api.update(rid, clean_form(self.spec.form_fields, data))
        logger.info("%s: updated %s", self.spec.key, rid)
        self.refresh()
        return body

    def update_status(self, rid: str, status: str) -> Any:
        body = self.api.update_status(rid, status)
        logger.info("%s: status of %s -> %s", self.spec.key, rid, status)
        self.refresh()
        return body

    def toggle(self, rid: str, action: str) -> Any:
        body = self.api.toggle(rid, action)
        self.refresh()
        return body

    def delete(self, rid: str, confirm: Confirm) -> bool:
        if not confirm("Are you sure you want to delete this record? This action cannot be undone."):
            return False
        self.api.delete(rid)
        logger.info("%s: deleted %s", self.spec.key, rid)
        self.select(rid, False)
        self.refresh()
        return True

    def delete_selected(self, confirm: Confirm) -> int:
        ids = sorted(self.selected)
        if not ids:
            return 0
        if not confirm(f"Are you sure you want to delete {len(ids)} record(s)? This action cannot be undone."):
            return 0
        count = self.api.delete_many(ids)
        logger.info("%s: bulk deleted %d records", self.spec.key, count)
        with self._lock:
            self.selected = set()
        self.refresh()
        return count

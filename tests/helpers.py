# tests/helpers.py
from __future__ import annotations

import csv
import io
import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from core.api_client import ApiClient
from core.auth import AdminSession

BASE_URL = "http://backend.test/api"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, content: Optional[bytes] = None):
        self.status_code = status_code
        if content is not None:
            self.content = content
        elif body is not None:
            self.content = json.dumps(body).encode("utf-8")
        else:
            self.content = b""

    def json(self):
        return json.loads(self.content.decode("utf-8"))


Handler = Callable[[str, str, Dict[str, Any]], FakeResponse]


class FakeHttp:
    """Stands in for requests.Session; records every call."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def request(self, method, url, **kwargs):
        path = urlparse(url).path
        if path.startswith("/api"):
            path = path[len("/api"):]
        self.calls.append((method, path, kwargs))
        return self.handler(method, path, kwargs)

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.calls if m == method and p == path)


def make_client(handler: Handler, token: Optional[str] = "tok-123", on_unauthorized=None):
    http = FakeHttp(handler)
    client = ApiClient(
        BASE_URL,
        session=AdminSession(token=token, user={"email": "admin@institute.test", "name": "Admin"}),
        on_unauthorized=on_unauthorized,
        http=http,
    )
    return client, http


class FakeResultBackend:
    """
    In-memory stand-in for the /result endpoints: list, upload-csv (parses
    the file server-side), delete, bulk delete.
    """

    def __init__(self, path: str = "/result", records: Optional[List[Dict[str, Any]]] = None):
        self.path = path
        self.records: List[Dict[str, Any]] = list(records or [])
        self.next_id = len(self.records) + 1
        self.uploads: List[Dict[str, Any]] = []

    def _list(self, params: Dict[str, Any]) -> FakeResponse:
        page = int(params.get("page") or 1)
        limit = int(params.get("limit") or 10)
        start = (page - 1) * limit
        chunk = self.records[start:start + limit]
        pages = max(1, -(-len(self.records) // limit))
        return FakeResponse(200, {
            "success": True,
            "data": {
                "results": [dict(r) for r in chunk],
                "pagination": {"page": page, "pages": pages, "total": len(self.records)},
            },
        })

    def _upload(self, kwargs: Dict[str, Any]) -> FakeResponse:
        name, content, _mime = kwargs["files"]["csvFile"]
        self.uploads.append({"name": name, "data": dict(kwargs.get("data") or {})})
        reader = csv.DictReader(io.StringIO(content.decode("utf-8")))
        inserted = 0
        for row in reader:
            if (row.get("ROLL NO") or "").strip() and (row.get("STUDENT NAME") or "").strip():
                self.records.append({
                    "_id": f"r{self.next_id}",
                    "rollNo": row["ROLL NO"].strip(),
                    "studentName": row["STUDENT NAME"].strip(),
                })
                self.next_id += 1
                inserted += 1
        return FakeResponse(200, {"success": True, "data": {"insertedCount": inserted, "totalRows": inserted}})

    def __call__(self, method: str, path: str, kwargs: Dict[str, Any]) -> FakeResponse:
        if method == "GET" and path == self.path:
            return self._list(kwargs.get("params") or {})
        if method == "POST" and path == f"{self.path}/upload-csv":
            return self._upload(kwargs)
        if method == "DELETE" and path == f"{self.path}/multiple":
            ids = set(kwargs["json"]["ids"])
            before = len(self.records)
            self.records = [r for r in self.records if r["_id"] not in ids]
            return FakeResponse(200, {"success": True, "data": {"deletedCount": before - len(self.records)}})
        if method == "DELETE" and path.startswith(f"{self.path}/"):
            rid = path.rsplit("/", 1)[-1]
            self.records = [r for r in self.records if r["_id"] != rid]
            return FakeResponse(200, {"success": True, "message": "Deleted"})
        return FakeResponse(404, {"success": False, "message": f"No route {method} {path}"})

# core/api_client.py
# -------------------------------------------------------------------
# Thin JSON-over-HTTP client for the institute backend.
# - Bearer token comes from the AdminSession the client was built with
# - 401 calls the caller-supplied on_unauthorized hook, then raises
# - `success: false` bodies are raised as ApiError with the backend message
# -------------------------------------------------------------------
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from core.auth import AdminSession
from core.errors import ApiError, UnauthorizedError

logger = logging.getLogger(__name__)

UnauthorizedHook = Callable[[AdminSession], None]

REQUEST_FAILED = "Request failed"


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop empty values and send booleans the way the backend expects ("true"/"false")."""
    out: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        out[key] = value
    return out


def _json_or_none(resp) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def _message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return fallback


class ApiClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[AdminSession] = None,
        on_unauthorized: Optional[UnauthorizedHook] = None,
        timeout: float = 30,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or AdminSession()
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout
        self.http = http or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        url = self.url(path)
        try:
            resp = self.http.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                files=files,
                data=data,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError("Network error. Please check the backend is reachable.") from e

        if resp.status_code == 401:
            logger.warning("%s %s returned 401; session rejected", method, url)
            if self.on_unauthorized is not None:
                self.on_unauthorized(self.session)
            raise UnauthorizedError(
                _message(_json_or_none(resp), "Your session has expired. Please log in again."),
                status_code=401,
            )

        if resp.status_code >= 400:
            body = _json_or_none(resp)
            logger.error("%s %s returned HTTP %s", method, url, resp.status_code)
            raise ApiError(_message(body, REQUEST_FAILED), status_code=resp.status_code, payload=body)

        if raw:
            return resp.content

        body = _json_or_none(resp)
        if isinstance(body, dict) and body.get("success") is False:
            logger.warning("%s %s reported failure: %s", method, url, body.get("message"))
            raise ApiError(_message(body, REQUEST_FAILED), status_code=resp.status_code, payload=body)
        return body

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str, json: Any = None) -> Any:
        return self.request("DELETE", path, json=json)

    def upload(self, path: str, files: Mapping[str, Any], data: Optional[Mapping[str, Any]] = None) -> Any:
        """Multipart POST; requests sets the multipart Content-Type and boundary."""
        return self.request("POST", path, files=files, data=data)

    def download(self, path: str, params: Optional[Mapping[str, Any]] = None) -> bytes:
        return self.request("GET", path, params=params, raw=True)

# core/errors.py
from __future__ import annotations
from typing import Any, Optional


class DashboardError(Exception):
    """Base class for errors raised by the dashboard's non-UI code."""


class ApiError(DashboardError):
    """A backend request failed: transport error, non-2xx status, or `success: false`."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class UnauthorizedError(ApiError):
    """HTTP 401 from the backend. The session token is no longer valid."""


class CsvParseError(DashboardError):
    """The selected file is not a CSV or could not be read as one."""


class ValidationError(DashboardError):
    """Required form fields were left empty."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__("Please fill in: " + ", ".join(self.missing))

"""
Exception types raised by the EDRS client toolkit.
"""

from __future__ import annotations

from typing import Any, Optional


class EdrsError(Exception):
    """Base exception for all EDRS client failures."""


class ApiError(EdrsError):
    """A backend call that ended in a terminal failure.

    Carries the diagnostics the client logs for every failed request so that
    callers (UI handlers, connection checks) can report them without
    re-parsing the response.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
        request_id: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url
        self.method = method
        self.request_id = request_id
        self.payload = payload

    @property
    def is_auth_error(self) -> bool:
        return self.status == 401

    @property
    def is_server_error(self) -> bool:
        return self.status is not None and self.status >= 500

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "method": self.method,
            "status": self.status,
            "message": self.message,
            "request_id": self.request_id,
        }

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"


class ApiNetworkError(ApiError):
    """Connection-level failure (refused, DNS, timeout); no response received."""


class StorageConfigError(EdrsError):
    """Unknown storage provider or missing provider settings."""

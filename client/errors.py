from __future__ import annotations

import httpx


class ApiError(Exception):
    """A non-2xx API response, with the server's envelope message."""

    def __init__(self, status_code: int, message: str, response: httpx.Response | None = None, errors=None):
        self.status_code = status_code
        self.message = message
        self.response = response
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        message = response.reason_phrase or "Request failed"
        errors = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            errors = body.get("errors")
        return cls(response.status_code, message, response=response, errors=errors)


class SessionExpiredError(ApiError):
    """The refresh endpoint refused to renew the session; local state has been cleared."""

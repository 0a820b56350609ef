"""
HTTP clients for the Task Tracker API.

Both clients send JSON, unwrap the {success, message, data} envelope and
raise ApiError for non-2xx answers. Authenticated calls go through
SessionRenewalAuth; calls made with authenticated=False (register, login,
refresh, logout) bypass it.
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

import httpx

from client.errors import ApiError
from client.interceptor import SessionRenewalAuth
from client.session import ClientSession

DEFAULT_API_URL = os.getenv("TASK_TRACKER_API_URL", "http://localhost:5000/api")
DEFAULT_TIMEOUT = 30.0
REFRESH_PATH = "auth/refresh"


def _base_url(url) -> httpx.URL:
    url = httpx.URL(str(url))
    if not url.path.endswith("/"):
        url = url.copy_with(path=url.path + "/")
    return url


def unwrap(response: httpx.Response) -> Dict[str, Any]:
    """Return the envelope of a successful response or raise ApiError."""
    if response.is_error:
        raise ApiError.from_response(response)
    if not response.content:
        return {"success": True}
    return response.json()


class _BaseApiClient:
    def __init__(self, session: ClientSession, base_url=None):
        self.session = session
        self.base_url = _base_url(base_url or DEFAULT_API_URL)
        self.auth = SessionRenewalAuth(session, refresh_url=self.base_url.join(REFRESH_PATH))

    def _request_kwargs(self, json, params, authenticated) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        if not authenticated:
            kwargs["auth"] = None
        return kwargs


class ApiClient(_BaseApiClient):
    def __init__(
        self,
        session: ClientSession,
        base_url=None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(session, base_url)
        self._http = httpx.Client(
            base_url=self.base_url,
            auth=self.auth,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    def request(self, method: str, path: str, *, json=None, params=None, authenticated: bool = True) -> Dict[str, Any]:
        response = self._http.request(method, path, **self._request_kwargs(json, params, authenticated))
        return unwrap(response)

    def get(self, path, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path, **kwargs):
        return self.request("POST", path, **kwargs)

    def patch(self, path, **kwargs):
        return self.request("PATCH", path, **kwargs)

    def delete(self, path, **kwargs):
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class AsyncApiClient(_BaseApiClient):
    """
    Same contract as ApiClient; requests suspend while awaiting the network.

    Session reads and writes inside the auth flow are synchronous. With
    FileTokenStorage that is a small blocking file access per request.
    """

    def __init__(
        self,
        session: ClientSession,
        base_url=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(session, base_url)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def request(self, method: str, path: str, *, json=None, params=None, authenticated: bool = True) -> Dict[str, Any]:
        response = await self._http.request(method, path, **self._request_kwargs(json, params, authenticated))
        return unwrap(response)

    async def get(self, path, **kwargs):
        return await self.request("GET", path, **kwargs)

    async def post(self, path, **kwargs):
        return await self.request("POST", path, **kwargs)

    async def patch(self, path, **kwargs):
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path, **kwargs):
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

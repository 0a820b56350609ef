"""
httpx authentication flow that keeps the client session alive.

Every request gets the stored access token as a bearer credential. When the
API answers 401, the flow exchanges the stored refresh token for a new pair
and re-sends the original request once. The generator frame of auth_flow is
the per-attempt state: a request can only ever reach the retry branch once,
and the refresh call is sent straight to the transport, never back through
this flow.

sync_auth_flow and async_auth_flow wrap auth_flow so that a refresh call
which fails in transport (connection error, timeout) also ends the session
before the error reaches the caller.
"""
from __future__ import annotations

import logging
from typing import AsyncGenerator, Generator, Optional, Tuple

import httpx

from client.errors import SessionExpiredError
from client.session import ClientSession

logger = logging.getLogger(__name__)


class SessionRenewalAuth(httpx.Auth):
    # the refresh response body must be read inside the flow
    requires_response_body = True

    def __init__(self, session: ClientSession, refresh_url):
        self.session = session
        self.refresh_url = httpx.URL(refresh_url)

    def is_refresh_request(self, request: httpx.Request) -> bool:
        return request.url.host == self.refresh_url.host and request.url.path == self.refresh_url.path

    def build_refresh_request(self, refresh_token: str) -> httpx.Request:
        return httpx.Request("POST", self.refresh_url, json={"refreshToken": refresh_token})

    @staticmethod
    def _attach(request: httpx.Request, access_token: Optional[str]) -> None:
        if access_token:
            request.headers["Authorization"] = f"Bearer {access_token}"

    @staticmethod
    def _tokens_from(response: httpx.Response) -> Optional[Tuple[str, str]]:
        if not response.is_success:
            return None
        try:
            tokens = response.json()["data"]["tokens"]
            return tokens["accessToken"], tokens["refreshToken"]
        except (ValueError, KeyError, TypeError):
            logger.warning("Refresh endpoint returned an unexpected body")
            return None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self._attach(request, self.session.access_token)
        response = yield request

        if response.status_code != 401 or self.is_refresh_request(request):
            return

        refresh_token = self.session.refresh_token
        if not refresh_token:
            # nothing to renew with: the original 401 goes back to the caller
            self.session.expire()
            return

        logger.debug("Access token rejected for %s %s, refreshing", request.method, request.url.path)
        refresh_response = yield self.build_refresh_request(refresh_token)
        tokens = self._tokens_from(refresh_response)
        if tokens is None:
            self.session.expire()
            raise SessionExpiredError.from_response(refresh_response)

        self.session.store_tokens(*tokens)
        self._attach(request, tokens[0])
        yield request

    def _refresh_in_flight(self, original: httpx.Request, pending: httpx.Request) -> bool:
        return pending is not original and self.is_refresh_request(pending)

    def _abandon(self, original: httpx.Request, pending: httpx.Request) -> None:
        # the refresh call never produced a response: the session cannot be renewed
        if self._refresh_in_flight(original, pending):
            logger.warning("Refresh request to %s failed in transport", pending.url.path)
            self.session.expire()

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        flow = self.auth_flow(request)
        pending = next(flow)
        while True:
            try:
                response = yield pending
                response.read()
            except (GeneratorExit, httpx.HTTPError):
                self._abandon(request, pending)
                raise
            try:
                pending = flow.send(response)
            except StopIteration:
                break

    async def async_auth_flow(self, request: httpx.Request) -> AsyncGenerator[httpx.Request, httpx.Response]:
        flow = self.auth_flow(request)
        pending = next(flow)
        while True:
            try:
                response = yield pending
                await response.aread()
            except (GeneratorExit, httpx.HTTPError):
                self._abandon(request, pending)
                raise
            try:
                pending = flow.send(response)
            except StopIteration:
                break

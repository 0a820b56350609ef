"""
Explicit client session context.

One ClientSession is created when the client application starts, hydrated
from its TokenStorage, and torn down on logout or when the server refuses to
renew it. Everything that needs the current tokens is handed this object.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from client.storage import ACCESS_TOKEN, REFRESH_TOKEN, USER, MemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)


class ClientSession:
    def __init__(
        self,
        storage: TokenStorage | None = None,
        on_unauthenticated: Optional[Callable[[], None]] = None,
    ):
        self.storage = storage if storage is not None else MemoryTokenStorage()
        # called after the session is cleared because it can no longer be renewed
        self.on_unauthenticated = on_unauthenticated
        self.user: Optional[Dict[str, Any]] = None

    def hydrate(self) -> "ClientSession":
        """Load the cached user if a stored access token is present."""
        user = self.storage.get(USER)
        self.user = user if user and self.access_token else None
        return self

    @property
    def access_token(self) -> Optional[str]:
        return self.storage.get(ACCESS_TOKEN)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.storage.get(REFRESH_TOKEN)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def start(self, user: Dict[str, Any], tokens: Dict[str, str]) -> None:
        """Persist a fresh session returned by register or login."""
        self.storage.update(
            {
                ACCESS_TOKEN: tokens["accessToken"],
                REFRESH_TOKEN: tokens["refreshToken"],
                USER: user,
            }
        )
        self.user = user

    def store_tokens(self, access_token: str, refresh_token: str) -> None:
        self.storage.update({ACCESS_TOKEN: access_token, REFRESH_TOKEN: refresh_token})

    def end(self) -> None:
        """Clear local state (logout)."""
        self.storage.clear()
        self.user = None

    def expire(self) -> None:
        """Clear local state and send the user back to an unauthenticated entry point."""
        logger.info("Session could not be renewed; clearing stored credentials")
        self.end()
        if self.on_unauthenticated is not None:
            self.on_unauthenticated()

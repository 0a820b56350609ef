from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps

from flask import g, request

from utils.errors import InvalidToken, Unauthorized
from utils.security import get_token_codec

logger = logging.getLogger(__name__)

NO_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid or expired token"


@dataclass(frozen=True)
class AuthUser:
    user_id: str
    email: str


def bearer_token(header: str | None) -> str | None:
    """Return the token from an exact "Bearer <token>" header, else None."""
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def auth_required():
    """
    Reject the request unless it carries a valid access token.
    On success g.current_user holds the caller's AuthUser.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token(request.headers.get("Authorization"))
            if token is None:
                raise Unauthorized(NO_TOKEN)
            try:
                payload = get_token_codec().verify_access(token)
            except InvalidToken as exc:
                # one message for every failure; the reason only goes to the log
                logger.debug("Access token rejected: %s", exc)
                raise Unauthorized(INVALID_TOKEN)

            g.current_user = AuthUser(user_id=payload.user_id, email=payload.email)
            return fn(*args, **kwargs)

        return wrapper

    return decorator

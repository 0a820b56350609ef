"""
Typed failures raised by the session layer and the authentication gate.

Each AppError carries the HTTP status the error handlers in api/errors.py
answer with. Messages are shown to clients as-is, so they must never say
which credential check failed.
"""
from __future__ import annotations


class InvalidToken(Exception):
    """Token could not be verified (signature, expiry, structure or type)."""


class AppError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class DuplicateEmail(AppError):
    status_code = 409
    default_message = "Email already registered"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidRefreshToken(AppError):
    status_code = 401
    default_message = "Invalid refresh token"


class RefreshTokenExpired(AppError):
    status_code = 401
    default_message = "Refresh token expired"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"

"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT, with separate secrets and lifetimes
  for access and refresh tokens
- JTI generation for token identifiers
"""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError, VerificationError
from flask import current_app

from utils.errors import InvalidToken

ph = PasswordHasher()

DEFAULT_REFRESH_DAYS = 7

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_duration(value) -> timedelta:
    """Parse "15m", "7d", "12h", "30s", "2w" or a bare number of seconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value or ""))
    if not match:
        raise ValueError(f"Unparsable duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit.lower()])


def refresh_lifetime_from(value) -> timedelta:
    """
    Lifetime used for persisted refresh rows.
    Falls back to the leading integer as a number of days, then to 7 days.
    """
    try:
        return parse_duration(value)
    except ValueError:
        pass
    digits = re.match(r"^\s*(\d+)", str(value or ""))
    if digits and int(digits.group(1)) > 0:
        return timedelta(days=int(digits.group(1)))
    return timedelta(days=DEFAULT_REFRESH_DAYS)


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str

    def to_dict(self) -> Dict[str, str]:
        return {"userId": self.user_id, "email": self.email}


@dataclass(frozen=True)
class AuthTokens:
    access_token: str
    refresh_token: str

    def to_dict(self) -> Dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class TokenCodec:
    """
    Signs and verifies access and refresh JWTs.

    Access and refresh tokens use independent secrets, so a token of one kind
    never verifies on the other path. Each token also carries its "type" and a
    fresh "jti", which keeps two tokens minted in the same second distinct.
    """

    ACCESS = "access"
    REFRESH = "refresh"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_lifetime: timedelta = timedelta(minutes=15),
        refresh_lifetime: timedelta = timedelta(days=DEFAULT_REFRESH_DAYS),
        algorithm: str = "HS256",
        issuer: str = "task-tracker-api",
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_lifetime = access_lifetime
        self.refresh_lifetime = refresh_lifetime
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenCodec":
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_lifetime=parse_duration(config.get("JWT_ACCESS_EXPIRY", "15m")),
            refresh_lifetime=refresh_lifetime_from(config.get("JWT_REFRESH_EXPIRY", "7d")),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "task-tracker-api"),
        )

    def _sign(self, payload: TokenPayload, token_type: str, secret: str, lifetime: timedelta) -> str:
        now = _now()
        claims = {
            "iss": self.issuer,
            "sub": str(payload.user_id),
            "userId": str(payload.user_id),
            "email": payload.email,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
            "type": token_type,
            "jti": generate_jti(),
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def _verify(self, token: str, token_type: str, secret: str) -> TokenPayload:
        if not token or not isinstance(token, str):
            raise InvalidToken("Token missing")
        try:
            decoded = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"Invalid token: {exc}")

        if decoded.get("type") != token_type:
            raise InvalidToken("Wrong token type")
        user_id, email = decoded.get("userId"), decoded.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise InvalidToken("Malformed token payload")
        return TokenPayload(user_id=user_id, email=email)

    def sign_access(self, payload: TokenPayload) -> str:
        return self._sign(payload, self.ACCESS, self.access_secret, self.access_lifetime)

    def sign_refresh(self, payload: TokenPayload) -> str:
        return self._sign(payload, self.REFRESH, self.refresh_secret, self.refresh_lifetime)

    def sign_pair(self, payload: TokenPayload) -> AuthTokens:
        return AuthTokens(
            access_token=self.sign_access(payload),
            refresh_token=self.sign_refresh(payload),
        )

    def verify_access(self, token: str) -> TokenPayload:
        """Raises InvalidToken on bad signature, expiry or structure."""
        return self._verify(token, self.ACCESS, self.access_secret)

    def verify_refresh(self, token: str) -> TokenPayload:
        return self._verify(token, self.REFRESH, self.refresh_secret)

    def refresh_expiry_timestamp(self, now: datetime | None = None) -> datetime:
        return (now or _now()) + self.refresh_lifetime


def get_token_codec() -> TokenCodec:
    """Codec built by create_app() for the current application."""
    return current_app.extensions["token_codec"]

"""
Session lifecycle: register, login, refresh (rotation) and logout.

Refresh tokens are single-use. Each successful refresh deletes the row of the
token it consumed and stores a row for its replacement, so presenting an
already-rotated token finds no row and fails.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models.refresh_token import RefreshToken
from models.schemas.user import UserOutSchema
from models.user import User
from utils.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidRefreshToken,
    InvalidToken,
    RefreshTokenExpired,
)
from utils.security import AuthTokens, TokenCodec, TokenPayload, hash_password, verify_password

logger = logging.getLogger(__name__)

user_out_schema = UserOutSchema()


class SessionManager:
    def __init__(
        self,
        storage,
        codec: TokenCodec,
        hasher: Callable[[str], str] = hash_password,
        verifier: Callable[[str, str], bool] = verify_password,
    ):
        self.storage = storage
        self.codec = codec
        self.hasher = hasher
        self.verifier = verifier

    def _issue(self, user: User) -> AuthTokens:
        """Sign a fresh pair for user and stage its refresh row (caller commits)."""
        tokens = self.codec.sign_pair(TokenPayload(user_id=user.id, email=user.email))
        self.storage.new(
            RefreshToken(
                token=tokens.refresh_token,
                user_id=user.id,
                expires_at=self.codec.refresh_expiry_timestamp(),
            )
        )
        return tokens

    def register(self, email: str, password: str, name: str) -> Dict:
        if self.storage.find_one(User, email=email) is not None:
            raise DuplicateEmail()

        user = User(email=email, password_hash=self.hasher(password), name=name)
        self.storage.new(user)
        tokens = self._issue(user)
        try:
            self.storage.save()
        except IntegrityError as exc:
            # lost a race with a concurrent registration of the same email
            logger.warning("Register IntegrityError: %s", exc)
            raise DuplicateEmail() from exc

        logger.info("User registered: %s", user.id)
        return {"user": user_out_schema.dump(user), "tokens": tokens}

    def login(self, email: str, password: str) -> Dict:
        user = self.storage.find_one(User, email=email)
        # same error for unknown email and wrong password
        if user is None or not self.verifier(password, user.password_hash):
            raise InvalidCredentials()

        tokens = self._issue(user)
        self.storage.save()

        logger.info("User logged in: %s", user.id)
        return {"user": user_out_schema.dump(user), "tokens": tokens}

    def refresh(self, refresh_token: str) -> Dict:
        try:
            self.codec.verify_refresh(refresh_token)
        except InvalidToken as exc:
            logger.warning("Refresh rejected, token failed verification: %s", exc)
            raise InvalidRefreshToken()

        stored = self.storage.find_one(RefreshToken, token=refresh_token)
        if stored is None:
            logger.warning("Refresh rejected, token not found (rotated or logged out)")
            raise InvalidRefreshToken()

        if stored.is_expired():
            self.storage.delete_many(RefreshToken, id=stored.id)
            self.storage.save()
            logger.warning("Refresh rejected, stored token expired for user %s", stored.user_id)
            raise RefreshTokenExpired()

        user = stored.user
        # the DELETE decides which of several concurrent refreshes of the same token wins
        if self.storage.delete_many(RefreshToken, id=stored.id) != 1:
            self.storage.rollback()
            logger.warning("Refresh rejected, token already consumed for user %s", user.id)
            raise InvalidRefreshToken()
        tokens = self._issue(user)
        self.storage.save()

        logger.info("Tokens rotated for user %s", user.id)
        return {"tokens": tokens}

    def logout(self, refresh_token: str | None) -> Dict:
        if refresh_token:
            removed = self.storage.delete_many(RefreshToken, token=refresh_token)
            self.storage.save()
            logger.info("Logout removed %d refresh token(s)", removed)
        return {"message": "Logged out successfully"}


def get_session_manager() -> SessionManager:
    return current_app.extensions["session_manager"]

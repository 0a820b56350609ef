"""
Client-local persistent storage for the session: access token, refresh token
and the cached user profile.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"
USER = "user"
SESSION_KEYS = (ACCESS_TOKEN, REFRESH_TOKEN, USER)


class TokenStorage:
    """Key/value store the client session reads through on every use."""

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def update(self, values: Dict[str, Any]) -> None:
        """Write several keys at once."""
        raise NotImplementedError

    def clear(self) -> None:
        """Remove every session key in a single write."""
        raise NotImplementedError


class MemoryTokenStorage(TokenStorage):
    def __init__(self, initial: Dict[str, Any] | None = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def update(self, values):
        self._data.update(values)

    def clear(self):
        for key in SESSION_KEYS:
            self._data.pop(key, None)


class FileTokenStorage(TokenStorage):
    """
    JSON file on disk. Every write replaces the whole file via os.replace,
    so a reader sees either the old session or the new one, never a mix.
    """

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get(self, key):
        return self._read().get(key)

    def update(self, values):
        data = self._read()
        data.update(values)
        self._write(data)

    def clear(self):
        data = self._read()
        for key in SESSION_KEYS:
            data.pop(key, None)
        self._write(data)

"""
Session storage for the auth token and the cached user identity.

Supports an in-memory store for tests/scripts and a JSON file store that
persists the session between runs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Client-side persistent storage for the session token and user."""

    def get_token(self) -> Optional[str]:
        ...

    def set_token(self, token: str) -> None:
        ...

    def get_user(self) -> Optional[dict]:
        ...

    def set_user(self, user: Optional[dict]) -> None:
        ...

    def clear(self) -> None:
        ...


@dataclass
class InMemorySessionStore:
    """Session held in process memory only."""

    token: Optional[str] = None
    user: Optional[dict] = None

    def get_token(self) -> Optional[str]:
        return self.token

    def set_token(self, token: str) -> None:
        self.token = token

    def get_user(self) -> Optional[dict]:
        return self.user

    def set_user(self, user: Optional[dict]) -> None:
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


@dataclass
class FileSessionStore:
    """
    Session persisted as ``{"token": ..., "user": ...}`` in a JSON file.

    Every read goes to disk so that several clients sharing the file observe
    each other's logins and invalidations.
    """

    path: Path

    def __post_init__(self):
        self.path = Path(self.path).expanduser()

    def _load(self) -> dict:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get_token(self) -> Optional[str]:
        return self._load().get("token")

    def set_token(self, token: str) -> None:
        data = self._load()
        data["token"] = token
        self._save(data)

    def get_user(self) -> Optional[dict]:
        return self._load().get("user")

    def set_user(self, user: Optional[dict]) -> None:
        data = self._load()
        if user is None:
            data.pop("user", None)
        else:
            data["user"] = user
        self._save(data)

    def clear(self) -> None:
        # Deleting an already-deleted session is a no-op.
        self.path.unlink(missing_ok=True)

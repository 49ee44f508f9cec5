"""Local key-value persistence for the user list and app preferences.

The tracker only needs a mapping from a fixed string key to stored bytes.
``FileKeyValueStore`` keeps one file per key under a data directory;
``InMemoryKeyValueStore`` backs tests and failure injection.

The whole user list is written on every save (no deltas), encoded as JSON
with ISO-8601 dates via pydantic.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from src.models.users import AppPreferences, User
from src.tracker.errors import PersistenceError

logger = logging.getLogger("cyclekeeper.tracker.persistence")

_USERS_ADAPTER = TypeAdapter(list[User])
_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStore(Protocol):
    """Byte store keyed by string."""

    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, data: bytes) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store.  Set ``fail_writes`` to simulate a full disk."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def put(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise OSError(f"write refused for key {key!r}")
        self.data[key] = data
        self.write_count += 1


class FileKeyValueStore:
    """One file per key inside ``root``; writes replace the file atomically."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{_SAFE_KEY.sub('_', key)}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def put(self, key: str, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_users(users: list[User], indent: int | None = None) -> bytes:
    return _USERS_ADAPTER.dump_json(users, indent=indent)


def decode_users(data: bytes) -> list[User]:
    """Parse stored bytes back into users.

    Raises:
        PersistenceError: If the payload is not a valid user list.
    """
    try:
        return _USERS_ADAPTER.validate_json(data)
    except ValidationError as exc:
        raise PersistenceError(f"Stored user list is corrupt: {exc}") from exc


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class UserRepository:
    """Load and save the full user list under a single key.

    Usage::

        repo = UserRepository(FileKeyValueStore("~/.cyclekeeper"))
        users = repo.load() or []
        repo.save(users)
    """

    def __init__(self, store: KeyValueStore, key: str = "SavedUsers") -> None:
        self.store = store
        self.key = key

    def load(self) -> list[User] | None:
        """Return the stored users, or None when nothing has been saved yet.

        Raises:
            PersistenceError: If the store cannot be read or holds invalid data.
        """
        try:
            data = self.store.get(self.key)
        except OSError as exc:
            logger.exception("Reading %r failed", self.key)
            raise PersistenceError(f"Could not read {self.key!r}: {exc}") from exc
        if data is None:
            return None
        users = decode_users(data)
        logger.debug("Loaded %d users from %r", len(users), self.key)
        return users

    def save(self, users: list[User]) -> None:
        """Serialize and write every user.

        Raises:
            PersistenceError: If encoding or writing fails.
        """
        try:
            payload = encode_users(users)
            self.store.put(self.key, payload)
        except (OSError, ValueError) as exc:
            logger.exception("Saving %d users to %r failed", len(users), self.key)
            raise PersistenceError(f"Could not save {self.key!r}: {exc}") from exc
        logger.debug("Saved %d users (%d bytes) to %r", len(users), len(payload), self.key)


class PreferencesRepository:
    """Process-wide flags stored next to the user list."""

    def __init__(self, store: KeyValueStore, key: str = "AppPreferences") -> None:
        self.store = store
        self.key = key

    def load(self) -> AppPreferences:
        """Return stored preferences, falling back to defaults when absent."""
        try:
            data = self.store.get(self.key)
        except OSError as exc:
            raise PersistenceError(f"Could not read {self.key!r}: {exc}") from exc
        if data is None:
            return AppPreferences()
        try:
            return AppPreferences.model_validate_json(data)
        except ValidationError as exc:
            raise PersistenceError(f"Stored preferences are corrupt: {exc}") from exc

    def save(self, prefs: AppPreferences) -> None:
        try:
            self.store.put(self.key, prefs.model_dump_json().encode("utf-8"))
        except OSError as exc:
            logger.exception("Saving preferences to %r failed", self.key)
            raise PersistenceError(f"Could not save {self.key!r}: {exc}") from exc

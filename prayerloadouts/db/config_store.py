"""
Flat key-value configuration store.

The store is organized into named groups, each holding string entries.
It is the only persistence available to the plugin; richer data is
encoded into it by the loadout codec.

Two implementations:
- InMemoryConfigStore: dict-backed, for tests and headless use
- SqlConfigStore: SQLAlchemy-backed, one row per entry
"""

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from prayerloadouts.db import operations
from prayerloadouts.db.database import get_session


class ConfigStore(Protocol):
    """Interface the plugin needs from the host configuration store."""

    def get(self, group: str, key: str) -> str | None: ...

    def set(self, group: str, key: str, value: str) -> None: ...

    def unset(self, group: str, key: str) -> None: ...

    def list_keys(self, group: str, prefix: str = "") -> list[str]:
        """Keys in group starting with prefix (without the group), sorted."""
        ...

    def unset_prefix(self, group: str, prefix: str) -> int:
        """
        Remove every key in group starting with prefix.

        Returns:
            Number of keys removed

        Raises:
            ValueError: prefix is empty
        """
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """
        Group writes so they land together or not at all.

        Nested transactions join the outermost one.
        """
        ...


class InMemoryConfigStore:
    """Dict-backed config store."""

    def __init__(self, entries: dict[tuple[str, str], str] | None = None) -> None:
        self._entries: dict[tuple[str, str], str] = dict(entries or {})
        self._lock = threading.RLock()
        self._depth = 0

    def get(self, group: str, key: str) -> str | None:
        with self._lock:
            return self._entries.get((group, key))

    def set(self, group: str, key: str, value: str) -> None:
        with self._lock:
            self._entries[(group, key)] = str(value)

    def unset(self, group: str, key: str) -> None:
        with self._lock:
            self._entries.pop((group, key), None)

    def list_keys(self, group: str, prefix: str = "") -> list[str]:
        with self._lock:
            return sorted(
                key
                for entry_group, key in self._entries
                if entry_group == group and key.startswith(prefix)
            )

    def unset_prefix(self, group: str, prefix: str) -> int:
        if not prefix:
            raise ValueError("Refusing to delete an entire config group with an empty prefix")
        with self._lock:
            doomed = [
                entry
                for entry in self._entries
                if entry[0] == group and entry[1].startswith(prefix)
            ]
            for entry in doomed:
                del self._entries[entry]
            return len(doomed)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = dict(self._entries)
            self._depth = 1
            try:
                yield
            except BaseException:
                self._entries = snapshot
                raise
            finally:
                self._depth = 0

    def entries(self, group: str) -> dict[str, str]:
        """Copy of every entry in a group."""
        with self._lock:
            return {key: value for (g, key), value in self._entries.items() if g == group}


class SqlConfigStore:
    """
    Config store persisted through SQLAlchemy.

    Each call outside a transaction runs in its own committed session.
    Inside transaction(), calls on the same thread share one session that
    commits when the outermost transaction exits.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._local = threading.local()

    def get(self, group: str, key: str) -> str | None:
        with self._session_scope() as session:
            return operations.get_value(session, group, key)

    def set(self, group: str, key: str, value: str) -> None:
        with self._session_scope() as session:
            operations.set_value(session, group, key, str(value))

    def unset(self, group: str, key: str) -> None:
        with self._session_scope() as session:
            operations.unset_value(session, group, key)

    def list_keys(self, group: str, prefix: str = "") -> list[str]:
        with self._session_scope() as session:
            return operations.list_keys(session, group, prefix)

    def unset_prefix(self, group: str, prefix: str) -> int:
        with self._session_scope() as session:
            return operations.unset_prefix(session, group, prefix)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._active_session() is not None:
            yield
            return

        with get_session(self._session_factory) as session:
            self._local.session = session
            try:
                yield
            finally:
                self._local.session = None

    def _active_session(self) -> Session | None:
        return getattr(self._local, "session", None)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        active = self._active_session()
        if active is not None:
            yield active
            return

        with get_session(self._session_factory) as session:
            yield session

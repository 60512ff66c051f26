"""
Loadout persistence codec.

Maps LoadoutData onto the flat configuration store. Call sites go through
the LoadoutStore interface and never build keys themselves.

=============================================================================
KEY LAYOUT (group "prayerloadouts")
=============================================================================

    loadout.<key>.name                          display name
    loadout.<key>.book.<book>.order             "DEFAULT" or prayer ids
    loadout.<key>.book.<book>.filter.<flag>     integer, six flags
    loadout.<key>.book.<book>.hidden.<prayer>   opaque value
    last_loadout                                last used display name

<key> is the normalized name ([a-z0-9_] only), so "." always ends it and
a prefix scan on one loadout never reaches another. The name list is
derived from the ".name" records; there is no separate index.
"""

import logging
import re
from typing import Protocol

from prayerloadouts.config import CONFIG_GROUP, LAST_LOADOUT_KEY
from prayerloadouts.db.config_store import ConfigStore
from prayerloadouts.models.loadout import (
    FILTER_FLAGS,
    BookSnapshot,
    FilterFlag,
    FilterSettings,
    LoadoutData,
)

logger = logging.getLogger(__name__)

LOADOUT_KEY_PREFIX = "loadout."
NAME_FIELD = "name"
BOOK_FIELD = "book"
ORDER_FIELD = "order"
FILTER_FIELD = "filter"
HIDDEN_FIELD = "hidden"

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]")


class InvalidLoadoutNameError(ValueError):
    """Raised when a loadout name normalizes to an empty key."""

    def __init__(self, name: str | None):
        self.name = name
        super().__init__(f"Loadout name {name!r} has no usable characters")


def normalize_name(name: str | None) -> str:
    """
    Derive the storage key for a display name.

    Lowercases and replaces every character outside [a-z0-9] with "_".
    Many names map to one key; callers treat a shared key as the same
    loadout.

    Returns:
        Normalized key, "" for None or ""
    """
    if not name:
        return ""
    return _UNSAFE_CHARS.sub("_", name.lower())


class LoadoutStore(Protocol):
    """Persistence interface over the logical loadout model."""

    def list_names(self) -> list[str]: ...

    def exists(self, name: str) -> bool: ...

    def display_name(self, name: str) -> str | None: ...

    def get_loadout(self, name: str) -> LoadoutData | None: ...

    def save(self, name: str, book: int, snapshot: BookSnapshot) -> None: ...

    def load(self, name: str, book: int) -> BookSnapshot | None: ...

    def save_loadout(self, loadout: LoadoutData) -> None: ...

    def delete(self, name: str) -> bool: ...

    def rename(self, old_name: str, new_name: str) -> bool: ...

    def get_last_used(self) -> str | None: ...

    def set_last_used(self, name: str) -> None: ...

    def clear_last_used(self) -> None: ...


class FlatKeyLoadoutStore:
    """Loadout codec storing one config key per field."""

    def __init__(self, config: ConfigStore, group: str = CONFIG_GROUP) -> None:
        self._config = config
        self._group = group

    # --- Names ---

    def list_names(self) -> list[str]:
        """Display names of every persisted loadout, sorted case-insensitively."""
        names: list[str] = []
        for key in self._config.list_keys(self._group, LOADOUT_KEY_PREFIX):
            parts = key.split(".")
            if len(parts) != 3 or parts[2] != NAME_FIELD:
                continue
            display_name = self._config.get(self._group, key)
            if display_name:
                names.append(display_name)
        return sorted(names, key=lambda n: (n.casefold(), n))

    def exists(self, name: str) -> bool:
        return self.display_name(name) is not None

    def display_name(self, name: str) -> str | None:
        """Stored display name of the loadout name resolves to, or None."""
        return self._display_name(normalize_name(name))

    # --- Per-book save/load ---

    def save(self, name: str, book: int, snapshot: BookSnapshot) -> None:
        """
        Upsert one book of a loadout.

        Order, filters and hidden prayers for the book are written in one
        transaction. Other books are untouched. The display name is
        refreshed, so a name that normalizes to an existing key supersedes
        the previous display name.
        """
        key = self._require_key(name)
        with self._config.transaction():
            self._config.set(self._group, self._name_key(key), name)
            self._write_book(key, book, snapshot)

        logger.info("Saved loadout %s for book %d", name, book)

    def load(self, name: str, book: int) -> BookSnapshot | None:
        """
        Read one book of a loadout.

        Returns None when no order was ever stored for (name, book).
        """
        key = normalize_name(name)
        if not key:
            return None

        book_prefix = self._book_prefix(key, book)
        order = self._config.get(self._group, book_prefix + ORDER_FIELD)
        if not order:
            return None

        return BookSnapshot(
            order=order,
            filters=self._read_filters(book_prefix),
            hidden=self._read_hidden(book_prefix),
        )

    # --- Whole loadouts ---

    def get_loadout(self, name: str) -> LoadoutData | None:
        """Read every book of a loadout, or None if it does not exist."""
        key = normalize_name(name)
        display_name = self._display_name(key)
        if display_name is None:
            return None

        loadout = LoadoutData(display_name=display_name)
        for book in self._stored_books(key):
            snapshot = self.load(display_name, book)
            if snapshot is not None:
                loadout.apply_snapshot(book, snapshot)
        return loadout

    def save_loadout(self, loadout: LoadoutData) -> None:
        """
        Replace a loadout wholesale.

        Existing data under the same key is removed first. Books without an
        order are skipped since they cannot be loaded.
        """
        key = self._require_key(loadout.display_name)
        with self._config.transaction():
            self._unset_all(self._loadout_prefix(key))
            self._config.set(self._group, self._name_key(key), loadout.display_name)
            for book in loadout.books():
                snapshot = loadout.snapshot(book)
                if snapshot is not None:
                    self._write_book(key, book, snapshot)

        dropped = sorted(set(loadout.filters) | set(loadout.hidden_prayers))
        dropped = [book for book in dropped if not loadout.has_prayer_order(book)]
        if dropped:
            logger.debug("Skipped books without an order: %s", dropped)

        logger.info("Stored loadout %s (%d books)", loadout.display_name, len(loadout.books()))

    def delete(self, name: str) -> bool:
        """
        Remove every key of a loadout, all books at once.

        Returns True if anything was deleted.
        """
        key = normalize_name(name)
        if not key:
            return False

        prefix = self._loadout_prefix(key)
        if not self._config.list_keys(self._group, prefix):
            return False

        display_name = self._display_name(key)
        with self._config.transaction():
            self._unset_all(prefix)
            if display_name is not None and self.get_last_used() == display_name:
                self.clear_last_used()

        logger.info("Deleted loadout %s", display_name or name)
        return True

    def rename(self, old_name: str, new_name: str) -> bool:
        """
        Move a loadout to a new name.

        Rejected when old_name does not exist, or when new_name is already
        a listed name or normalizes to another loadout's key. A rename that
        keeps the same key (e.g. case change) only updates the display name.

        Returns:
            True if renamed
        """
        old_key = normalize_name(old_name)
        new_key = normalize_name(new_name)
        old_display = self._display_name(old_key)
        if old_display is None or not new_key:
            return False

        if new_name in self.list_names():
            logger.warning("Rename rejected, %s already exists", new_name)
            return False
        if new_key != old_key and self._display_name(new_key) is not None:
            logger.warning("Rename rejected, %s collides with an existing loadout", new_name)
            return False

        with self._config.transaction():
            if new_key != old_key:
                old_prefix = self._loadout_prefix(old_key)
                new_prefix = self._loadout_prefix(new_key)
                for key in self._config.list_keys(self._group, old_prefix):
                    value = self._config.get(self._group, key)
                    if value is not None:
                        self._config.set(self._group, new_prefix + key[len(old_prefix) :], value)
                    self._config.unset(self._group, key)

            self._config.set(self._group, self._name_key(new_key), new_name)
            if self.get_last_used() == old_display:
                self.set_last_used(new_name)

        logger.info("Renamed loadout %s to %s", old_display, new_name)
        return True

    # --- Last used ---

    def get_last_used(self) -> str | None:
        return self._config.get(self._group, LAST_LOADOUT_KEY) or None

    def set_last_used(self, name: str) -> None:
        self._config.set(self._group, LAST_LOADOUT_KEY, name)

    def clear_last_used(self) -> None:
        self._config.unset(self._group, LAST_LOADOUT_KEY)

    # --- Key helpers ---

    def _require_key(self, name: str) -> str:
        key = normalize_name(name)
        if not key:
            raise InvalidLoadoutNameError(name)
        return key

    @staticmethod
    def _loadout_prefix(key: str) -> str:
        return f"{LOADOUT_KEY_PREFIX}{key}."

    def _name_key(self, key: str) -> str:
        return self._loadout_prefix(key) + NAME_FIELD

    def _book_prefix(self, key: str, book: int) -> str:
        return f"{self._loadout_prefix(key)}{BOOK_FIELD}.{book}."

    def _display_name(self, key: str) -> str | None:
        if not key:
            return None
        return self._config.get(self._group, self._name_key(key)) or None

    def _stored_books(self, key: str) -> list[int]:
        books_prefix = f"{self._loadout_prefix(key)}{BOOK_FIELD}."
        books: set[int] = set()
        for stored_key in self._config.list_keys(self._group, books_prefix):
            book_token = stored_key[len(books_prefix) :].split(".", 1)[0]
            if book_token.isdigit():
                books.add(int(book_token))
            else:
                logger.debug("Ignoring unparsable loadout key %s", stored_key)
        return sorted(books)

    def _unset_all(self, prefix: str) -> int:
        return self._config.unset_prefix(self._group, prefix)

    # --- Book encoding ---

    def _write_book(self, key: str, book: int, snapshot: BookSnapshot) -> None:
        book_prefix = self._book_prefix(key, book)
        self._unset_all(book_prefix)

        self._config.set(self._group, book_prefix + ORDER_FIELD, snapshot.order)

        if snapshot.filters is not None:
            for flag, value in snapshot.filters.as_flags().items():
                self._config.set(self._group, f"{book_prefix}{FILTER_FIELD}.{flag}", str(value))

        for prayer_key, value in snapshot.hidden.items():
            self._config.set(self._group, f"{book_prefix}{HIDDEN_FIELD}.{prayer_key}", value)

    def _read_filters(self, book_prefix: str) -> FilterSettings | None:
        filter_prefix = f"{book_prefix}{FILTER_FIELD}."
        stored = self._config.list_keys(self._group, filter_prefix)
        if not stored:
            return None

        values: dict[FilterFlag, int] = {}
        for flag in FILTER_FLAGS:
            raw = self._config.get(self._group, filter_prefix + flag)
            if raw is None:
                continue
            try:
                values[flag] = int(raw)
            except ValueError:
                logger.debug("Non-integer filter value %r for %s", raw, filter_prefix + flag)
        return FilterSettings.from_flags(values)

    def _read_hidden(self, book_prefix: str) -> dict[str, str]:
        hidden_prefix = f"{book_prefix}{HIDDEN_FIELD}."
        hidden: dict[str, str] = {}
        for stored_key in self._config.list_keys(self._group, hidden_prefix):
            value = self._config.get(self._group, stored_key)
            if value is not None:
                hidden[stored_key[len(hidden_prefix) :]] = value
        return hidden

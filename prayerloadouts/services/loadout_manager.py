"""
Loadout orchestration: save, load, delete, rename and active detection.

The manager owns one piece of state, a cached (book, filter fingerprint)
snapshot. The host refreshes it through update_cached_snapshot() on login
and whenever a filter varbit changes; active detection reads the cache
instead of the filter varbits, so it is only as fresh as the last refresh.

save(), load() and reset_to_defaults() read live state and must run on
the designated client thread. Filter writes are submitted to the client
executor as one pipeline:

    set filter flags -> redraw -> refresh cache -> on_applied()

Every guarded operation is a silent no-op when the player is logged out
or the prayer plugin is disabled. Nothing raises to the UI.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from prayerloadouts.config import DEFAULT_ORDER
from prayerloadouts.host.client_thread import ClientExecutor
from prayerloadouts.host.live_state import LiveState
from prayerloadouts.models.loadout import BookSnapshot, FilterSettings
from prayerloadouts.services.fingerprint import filter_fingerprint, hidden_fingerprint
from prayerloadouts.services.loadout_store import LoadoutStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedSnapshot:
    """
    Live state captured right after the most recent filter write.

    An empty fingerprint means "not captured yet" and matches nothing.
    """

    book: int = 0
    filter_fingerprint: str = ""


class LoadoutManager:
    """Coordinates the loadout store with live prayer book state."""

    def __init__(
        self,
        store: LoadoutStore,
        live_state: LiveState,
        executor: ClientExecutor,
    ) -> None:
        self._store = store
        self._live = live_state
        self._executor = executor
        self._cache = CachedSnapshot()

    # --- Cache ---

    @property
    def cached_snapshot(self) -> CachedSnapshot:
        return self._cache

    def update_cached_snapshot(self) -> None:
        """Capture the current book and filter fingerprint. Client thread only."""
        book = self._live.get_book()
        self._cache = CachedSnapshot(
            book=book,
            filter_fingerprint=filter_fingerprint(self._live.get_filter_settings()),
        )

    # --- Queries ---

    def loadout_names(self) -> list[str]:
        return self._store.list_names()

    def last_loadout_name(self) -> str | None:
        return self._store.get_last_used()

    def _can_apply(self) -> bool:
        return self._live.is_session_active() and self._live.is_feature_enabled()

    # --- Mutations ---

    def save(self, name: str) -> bool:
        """
        Snapshot the current book into a loadout.

        Upserts only the current book; other books of the loadout stay
        as they are.

        Returns:
            True if saved, False when preconditions fail
        """
        name = (name or "").strip()
        if not name or not self._can_apply():
            return False

        book = self._live.get_book()
        snapshot = BookSnapshot(
            order=self._live.get_order(book) or DEFAULT_ORDER,
            filters=self._live.get_filter_settings(),
            hidden=self._live.get_hidden_items(book),
        )

        self._store.save(name, book, snapshot)
        self._store.set_last_used(name)
        return True

    def load(self, name: str, on_applied: Callable[[], None] | None = None) -> bool:
        """
        Apply a loadout to the current book.

        Order and hidden prayers are written immediately. Filter flags are
        applied on the client executor, followed by a redraw and a cache
        refresh; on_applied runs after all of that.

        Returns:
            True if applied, False when preconditions fail or the loadout
            has no data for the current book (live state untouched)
        """
        name = (name or "").strip()
        if not name or not self._can_apply():
            return False

        display_name = self._store.display_name(name)
        if display_name is None:
            return False

        book = self._live.get_book()
        snapshot = self._store.load(display_name, book)
        if snapshot is None:
            logger.info("Loadout %s has no data for book %d", display_name, book)
            return False

        if snapshot.is_default_order:
            self._live.clear_order(book)
        else:
            self._live.set_order(book, snapshot.order)

        self._live.replace_hidden_items(book, snapshot.hidden)

        filters = snapshot.filters if snapshot.filters is not None else FilterSettings()
        self._executor.submit(lambda: self._apply_filters(filters, on_applied))

        self._store.set_last_used(display_name)
        logger.info("Loaded loadout %s for book %d", display_name, book)
        return True

    def delete(self, name: str) -> bool:
        """Remove a loadout and all its books. False if unknown."""
        name = (name or "").strip()
        if not name:
            return False
        return self._store.delete(name)

    def rename(self, old_name: str, new_name: str) -> bool:
        """
        Rename a loadout, keeping every book's data.

        Returns:
            False if old_name is unknown or new_name is taken
        """
        old_name = (old_name or "").strip()
        new_name = (new_name or "").strip()
        if not old_name or not new_name:
            return False
        return self._store.rename(old_name, new_name)

    def reset_to_defaults(self, on_applied: Callable[[], None] | None = None) -> bool:
        """
        Restore the vanilla prayer book for the current book.

        Clears the custom order and hidden prayers, zeroes every filter
        flag and forgets the last used loadout.
        """
        if not self._can_apply():
            return False

        book = self._live.get_book()
        self._live.clear_order(book)
        self._live.replace_hidden_items(book, {})
        self._store.clear_last_used()

        self._executor.submit(lambda: self._apply_filters(FilterSettings(), on_applied))
        logger.info("Reset book %d to defaults", book)
        return True

    def _apply_filters(
        self, filters: FilterSettings, on_applied: Callable[[], None] | None
    ) -> None:
        for flag, value in filters.as_flags().items():
            self._live.set_filter_flag(flag, value)
        self._live.notify_redraw()
        self.update_cached_snapshot()
        if on_applied is not None:
            on_applied()

    # --- Active detection ---

    def active_loadout_name(self, is_session_active: bool) -> str | None:
        """
        Name of the saved loadout matching the current state, if any.

        Uses the cached book and filter fingerprint plus freshly read order
        and hidden prayers. The last used loadout wins when it matches;
        otherwise the first match in name order.
        """
        if not is_session_active:
            return None

        cache = self._cache
        book = cache.book
        current_order = self._live.get_order(book)
        current_hidden = hidden_fingerprint(self._live.get_hidden_items(book))

        names = self._store.list_names()
        candidates: list[str] = []
        last_used = self._store.get_last_used()
        if last_used and last_used in names:
            candidates.append(last_used)
        candidates.extend(name for name in names if name != last_used)

        for name in candidates:
            snapshot = self._store.load(name, book)
            if snapshot is not None and _matches(
                snapshot, current_order, current_hidden, cache.filter_fingerprint
            ):
                return name
        return None


def _matches(
    snapshot: BookSnapshot,
    current_order: str | None,
    current_hidden_fingerprint: str,
    current_filter_fingerprint: str,
) -> bool:
    """True if saved book state equals the current state."""
    if current_order is None:
        order_matches = snapshot.is_default_order
    else:
        order_matches = current_order == snapshot.order
    if not order_matches:
        return False

    if current_hidden_fingerprint != hidden_fingerprint(snapshot.hidden):
        return False

    return current_filter_fingerprint == filter_fingerprint(snapshot.filters)

"""
Live prayer book state.

LiveState is what the loadout manager reads and writes: the current book,
its order, the filter flags and the hidden prayers. ClientLiveState backs
it with the game client's varbits and the host's prayer config group.

All reads and writes must happen on the designated client thread.
"""

from collections.abc import Callable, Mapping
from typing import Protocol

from prayerloadouts.config import (
    PRAYER_CONFIG_GROUP,
    PRAYER_HIDDEN_KEY_PREFIX,
    PRAYER_ORDER_KEY_PREFIX,
)
from prayerloadouts.db.config_store import ConfigStore
from prayerloadouts.models.loadout import FILTER_FLAGS, FilterFlag, FilterSettings

PRAYERBOOK_VARBIT = "PRAYERBOOK"

FILTER_VARBITS: dict[FilterFlag, str] = {
    FilterFlag.BLOCK_LOW_TIER: "PRAYER_FILTER_BLOCKLOWTIER",
    FilterFlag.ALLOW_COMBINED_TIER: "PRAYER_FILTER_ALLOWCOMBINEDTIER",
    FilterFlag.BLOCK_HEALING: "PRAYER_FILTER_BLOCKHEALING",
    FilterFlag.BLOCK_LACK_LEVEL: "PRAYER_FILTER_BLOCKLACKLEVEL",
    FilterFlag.BLOCK_LOCKED: "PRAYER_FILTER_BLOCKLOCKED",
    FilterFlag.HIDE_FILTER_BUTTON: "PRAYER_HIDEFILTERBUTTON",
}

# Varbit changes that invalidate the cached filter fingerprint
FILTER_VARBIT_NAMES = frozenset(FILTER_VARBITS.values())


class LiveState(Protocol):
    """Current in-game prayer book state."""

    def get_book(self) -> int: ...

    def get_order(self, book: int) -> str | None: ...

    def set_order(self, book: int, value: str) -> None: ...

    def clear_order(self, book: int) -> None: ...

    def get_filter_flag(self, flag: FilterFlag) -> int: ...

    def set_filter_flag(self, flag: FilterFlag, value: int) -> None: ...

    def get_filter_settings(self) -> FilterSettings: ...

    def get_hidden_items(self, book: int) -> dict[str, str]: ...

    def replace_hidden_items(self, book: int, hidden: Mapping[str, str]) -> None: ...

    def is_session_active(self) -> bool: ...

    def is_feature_enabled(self) -> bool: ...

    def notify_redraw(self) -> None: ...


class GameClient(Protocol):
    """The slice of the game client used here."""

    def get_varbit(self, name: str) -> int: ...

    def set_varbit(self, name: str, value: int) -> None: ...

    def is_logged_in(self) -> bool: ...

    def redraw_prayerbook(self) -> None: ...


class ClientLiveState:
    """
    LiveState backed by the game client and the host config store.

    Book and filter flags are varbits. Order and hidden prayers belong to
    the host's prayer plugin, which keeps them in its own config group:

        prayer.prayer_order_book_<book>         order string
        prayer.prayer_hidden_book_<book>_...    one key per hidden prayer
    """

    def __init__(
        self,
        client: GameClient,
        config: ConfigStore,
        feature_enabled: Callable[[], bool] = lambda: True,
    ) -> None:
        self._client = client
        self._config = config
        self._feature_enabled = feature_enabled

    def get_book(self) -> int:
        return self._client.get_varbit(PRAYERBOOK_VARBIT)

    # --- Order ---

    def get_order(self, book: int) -> str | None:
        return self._config.get(PRAYER_CONFIG_GROUP, f"{PRAYER_ORDER_KEY_PREFIX}{book}") or None

    def set_order(self, book: int, value: str) -> None:
        self._config.set(PRAYER_CONFIG_GROUP, f"{PRAYER_ORDER_KEY_PREFIX}{book}", value)

    def clear_order(self, book: int) -> None:
        self._config.unset(PRAYER_CONFIG_GROUP, f"{PRAYER_ORDER_KEY_PREFIX}{book}")

    # --- Filters ---

    def get_filter_flag(self, flag: FilterFlag) -> int:
        return self._client.get_varbit(FILTER_VARBITS[flag])

    def set_filter_flag(self, flag: FilterFlag, value: int) -> None:
        self._client.set_varbit(FILTER_VARBITS[flag], value)

    def get_filter_settings(self) -> FilterSettings:
        return FilterSettings.from_flags({flag: self.get_filter_flag(flag) for flag in FILTER_FLAGS})

    # --- Hidden prayers ---

    def get_hidden_items(self, book: int) -> dict[str, str]:
        hidden: dict[str, str] = {}
        for key in self._config.list_keys(PRAYER_CONFIG_GROUP, self._hidden_prefix(book)):
            value = self._config.get(PRAYER_CONFIG_GROUP, key)
            if value is not None:
                hidden[key] = value
        return hidden

    def replace_hidden_items(self, book: int, hidden: Mapping[str, str]) -> None:
        """Clear the book's hidden prayers, then write the given ones."""
        with self._config.transaction():
            self._config.unset_prefix(PRAYER_CONFIG_GROUP, self._hidden_prefix(book))
            for key, value in hidden.items():
                self._config.set(PRAYER_CONFIG_GROUP, key, value)

    @staticmethod
    def _hidden_prefix(book: int) -> str:
        return f"{PRAYER_HIDDEN_KEY_PREFIX}{book}_"

    # --- Session ---

    def is_session_active(self) -> bool:
        return self._client.is_logged_in()

    def is_feature_enabled(self) -> bool:
        return self._feature_enabled()

    def notify_redraw(self) -> None:
        self._client.redraw_prayerbook()

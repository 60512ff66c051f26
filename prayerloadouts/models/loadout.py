"""
Prayer loadout domain model.

A loadout is a named snapshot of the prayer book arrangement, stored per
prayerbook:

    order   - "DEFAULT" or a comma-separated list of prayer ids
    filters - six integer filter flags (absent means "no filters saved")
    hidden  - hidden prayer key -> stored value (carried opaquely)

A (loadout, book) pair is either absent or has an order. Filters and
hidden prayers may be missing; they default to "all off" / "nothing hidden".
"""

from dataclasses import dataclass, field
from enum import StrEnum

from prayerloadouts.config import DEFAULT_ORDER


class FilterFlag(StrEnum):
    """
    The six prayer filter flags.

    Member order is the fingerprint and export field order. It is part of
    the stored format and must not change.
    """

    BLOCK_LOW_TIER = "blocklowtier"
    ALLOW_COMBINED_TIER = "allowcombinedtier"
    BLOCK_HEALING = "blockhealing"
    BLOCK_LACK_LEVEL = "blocklacklevel"
    BLOCK_LOCKED = "blocklocked"
    HIDE_FILTER_BUTTON = "hidefilterbutton"

    @property
    def attribute(self) -> str:
        """Matching FilterSettings attribute name."""
        return self.name.lower()


FILTER_FLAGS: tuple[FilterFlag, ...] = tuple(FilterFlag)


@dataclass(frozen=True)
class FilterSettings:
    """Filter flags for one prayerbook. Values are opaque integers (0/1 in practice)."""

    block_low_tier: int = 0
    allow_combined_tier: int = 0
    block_healing: int = 0
    block_lack_level: int = 0
    block_locked: int = 0
    hide_filter_button: int = 0

    @classmethod
    def from_flags(cls, values: dict[FilterFlag, int]) -> "FilterSettings":
        """Build from a flag mapping. Flags not present default to 0."""
        return cls(**{flag.attribute: values.get(flag, 0) for flag in FILTER_FLAGS})

    def get(self, flag: FilterFlag) -> int:
        """Value of a single flag."""
        return getattr(self, flag.attribute)

    def as_flags(self) -> dict[FilterFlag, int]:
        """All six flags in format order."""
        return {flag: self.get(flag) for flag in FILTER_FLAGS}

    def values(self) -> tuple[int, ...]:
        return tuple(self.get(flag) for flag in FILTER_FLAGS)

    def fingerprint(self) -> str:
        """Fixed-order comma-joined flag values, e.g. "0,1,0,0,0,0"."""
        return ",".join(str(value) for value in self.values())


@dataclass
class BookSnapshot:
    """
    Saved (or live) state of a single prayerbook.

    Attributes:
        order: "DEFAULT" or comma-separated prayer ids
        filters: Filter flags, None when never saved
        hidden: Hidden prayer key -> stored value
    """

    order: str
    filters: FilterSettings | None = None
    hidden: dict[str, str] = field(default_factory=dict)

    @property
    def is_default_order(self) -> bool:
        return self.order == DEFAULT_ORDER


@dataclass
class LoadoutData:
    """
    One named loadout across all prayerbooks.

    Attributes:
        display_name: User-facing name, case preserved
        prayer_orders: book -> order string
        filters: book -> filter settings
        hidden_prayers: book -> {prayer key: value}
    """

    display_name: str
    prayer_orders: dict[int, str] = field(default_factory=dict)
    filters: dict[int, FilterSettings] = field(default_factory=dict)
    hidden_prayers: dict[int, dict[str, str]] = field(default_factory=dict)

    def get_prayer_order(self, book: int) -> str | None:
        return self.prayer_orders.get(book)

    def set_prayer_order(self, book: int, order: str) -> None:
        self.prayer_orders[book] = order

    def has_prayer_order(self, book: int) -> bool:
        """True if an order is defined and non-empty for this book."""
        return bool(self.prayer_orders.get(book))

    def get_filters(self, book: int) -> FilterSettings | None:
        return self.filters.get(book)

    def set_filters(self, book: int, filters: FilterSettings) -> None:
        self.filters[book] = filters

    def get_hidden_prayers(self, book: int) -> dict[str, str]:
        """Copy of the hidden prayers for a book (empty if none)."""
        return dict(self.hidden_prayers.get(book, {}))

    def set_hidden_prayers(self, book: int, hidden: dict[str, str]) -> None:
        self.hidden_prayers[book] = dict(hidden)

    def books(self) -> list[int]:
        """Books that hold data, ascending."""
        return sorted(book for book in self.prayer_orders if self.has_prayer_order(book))

    def snapshot(self, book: int) -> BookSnapshot | None:
        """State saved for a book, or None if the book is absent."""
        if not self.has_prayer_order(book):
            return None
        return BookSnapshot(
            order=self.prayer_orders[book],
            filters=self.filters.get(book),
            hidden=self.get_hidden_prayers(book),
        )

    def apply_snapshot(self, book: int, snapshot: BookSnapshot) -> None:
        """Replace everything stored for a book with a snapshot."""
        self.set_prayer_order(book, snapshot.order)
        if snapshot.filters is not None:
            self.set_filters(book, snapshot.filters)
        else:
            self.filters.pop(book, None)
        self.set_hidden_prayers(book, snapshot.hidden)

"""
Loadout export formatter.

Renders a stored loadout as export text. The inverse lives in
prayerloadouts.parsers.loadout_import.
"""

from prayerloadouts.models.loadout import LoadoutData
from prayerloadouts.parsers.loadout_import import (
    END_MARKER,
    EXPORT_PREFIX,
    FILTER_PREFIX,
    HIDDEN_PREFIX,
    ORDER_PREFIX,
)


def format_loadout_export(loadout: LoadoutData) -> str | None:
    """
    Format a loadout as export text.

    Books are written in ascending order and hidden prayers sorted by key,
    so the same loadout always exports to the same text.

    Returns:
        Export text ending in "END" (no trailing newline), or None when no
        book has an order (nothing to export)
    """
    books = loadout.books()
    if not books:
        return None

    lines: list[str] = [f"{EXPORT_PREFIX}{loadout.display_name}"]

    for book in books:
        lines.append(f"{ORDER_PREFIX}{book}:{loadout.get_prayer_order(book)}")

        filters = loadout.get_filters(book)
        if filters is not None:
            for flag, value in filters.as_flags().items():
                lines.append(f"{FILTER_PREFIX}{book}_{flag}:{value}")

        hidden = loadout.get_hidden_prayers(book)
        for prayer_key in sorted(hidden):
            lines.append(f"{HIDDEN_PREFIX}{book}_{prayer_key}:{hidden[prayer_key]}")

    lines.append(END_MARKER)
    return "\n".join(lines)

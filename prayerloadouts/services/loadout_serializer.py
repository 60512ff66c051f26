"""
Clipboard export and import of single loadouts.

Import is all-or-nothing at the envelope level: a malformed envelope is
rejected before anything is written. An import under an existing name
overwrites that loadout; asking for confirmation is up to the UI.
"""

import logging

from prayerloadouts.host.clipboard import Clipboard
from prayerloadouts.parsers.loadout_import import LoadoutImportError, parse_loadout_export
from prayerloadouts.services.loadout_formatter import format_loadout_export
from prayerloadouts.services.loadout_store import LoadoutStore, normalize_name

logger = logging.getLogger(__name__)


class LoadoutSerializer:
    """Moves loadouts between the store and the clipboard."""

    def __init__(self, store: LoadoutStore, clipboard: Clipboard) -> None:
        self._store = store
        self._clipboard = clipboard

    def export_text(self, name: str) -> str | None:
        """Export text for a loadout, or None if it has no data for any book."""
        loadout = self._store.get_loadout(name)
        if loadout is None:
            return None
        return format_loadout_export(loadout)

    def export_loadout(self, name: str) -> bool:
        """
        Copy a loadout to the clipboard.

        Returns:
            False if the loadout is unknown, has no data, or the clipboard
            refused the write
        """
        text = self.export_text(name)
        if text is None:
            return False

        if not self._clipboard.write_text(text):
            logger.warning("Clipboard rejected export of %s", name)
            return False

        logger.info("Exported loadout %s", name)
        return True

    def import_text(self, text: str | None, import_name: str | None = None) -> str | None:
        """
        Store a loadout from export text.

        Args:
            text: Export text
            import_name: Name to store under; blank means the exported name

        Returns:
            The name stored under, or None if the text was rejected
        """
        try:
            parsed = parse_loadout_export(text)
        except LoadoutImportError as e:
            logger.warning("Loadout import rejected: %s", e.reason)
            return None

        name = (import_name or "").strip() or parsed.original_name
        if not normalize_name(name):
            return None

        parsed.loadout.display_name = name
        self._store.save_loadout(parsed.loadout)

        logger.info(
            "loadout_imported",
            extra={
                "loadout_name": name,
                "original_name": parsed.original_name,
                "books": parsed.loadout.books(),
                "skipped_lines": parsed.skipped_lines,
            },
        )
        return name

    def import_loadout(self, import_name: str | None = None) -> bool:
        """
        Import a loadout from the clipboard.

        Returns:
            True if the clipboard held a valid export and it was stored
        """
        return self.import_text(self._clipboard.read_text(), import_name) is not None

from prayerloadouts.parsers.loadout_import import (
    LoadoutImportError,
    ParsedLoadout,
    parse_loadout_export,
)

__all__ = [
    "LoadoutImportError",
    "ParsedLoadout",
    "parse_loadout_export",
]

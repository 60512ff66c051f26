from prayerloadouts.services.fingerprint import (
    NO_FILTERS_FINGERPRINT,
    filter_fingerprint,
    hidden_fingerprint,
)
from prayerloadouts.services.loadout_formatter import format_loadout_export
from prayerloadouts.services.loadout_manager import CachedSnapshot, LoadoutManager
from prayerloadouts.services.loadout_serializer import LoadoutSerializer
from prayerloadouts.services.loadout_store import (
    FlatKeyLoadoutStore,
    InvalidLoadoutNameError,
    LoadoutStore,
    normalize_name,
)

__all__ = [
    "NO_FILTERS_FINGERPRINT",
    "CachedSnapshot",
    "FlatKeyLoadoutStore",
    "InvalidLoadoutNameError",
    "LoadoutManager",
    "LoadoutSerializer",
    "LoadoutStore",
    "filter_fingerprint",
    "format_loadout_export",
    "hidden_fingerprint",
    "normalize_name",
]

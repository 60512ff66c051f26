from prayerloadouts.models.db import Base, ConfigEntryDB
from prayerloadouts.models.loadout import (
    FILTER_FLAGS,
    BookSnapshot,
    FilterFlag,
    FilterSettings,
    LoadoutData,
)

__all__ = [
    "Base",
    "BookSnapshot",
    "ConfigEntryDB",
    "FILTER_FLAGS",
    "FilterFlag",
    "FilterSettings",
    "LoadoutData",
]

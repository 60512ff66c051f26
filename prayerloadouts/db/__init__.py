from prayerloadouts.db.config_store import ConfigStore, InMemoryConfigStore, SqlConfigStore
from prayerloadouts.db.database import (
    build_engine,
    build_session_factory,
    drop_db,
    get_session,
    init_db,
)
from prayerloadouts.db.operations import (
    get_entry,
    get_value,
    list_keys,
    set_value,
    unset_prefix,
    unset_value,
)

__all__ = [
    "ConfigStore",
    "InMemoryConfigStore",
    "SqlConfigStore",
    "build_engine",
    "build_session_factory",
    "drop_db",
    "get_entry",
    "get_session",
    "get_value",
    "init_db",
    "list_keys",
    "set_value",
    "unset_prefix",
    "unset_value",
]

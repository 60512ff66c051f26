"""
Database CRUD operations.

Provides functions for reading, writing and prefix-scanning configuration
entries. Callers own the session and its commit.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from prayerloadouts.models.db import ConfigEntryDB


def get_entry(session: Session, group: str, key: str) -> ConfigEntryDB | None:
    """
    Get a configuration entry by group and key.

    Returns None if no entry exists.
    """
    result = session.execute(
        select(ConfigEntryDB).where(
            ConfigEntryDB.group == group,
            ConfigEntryDB.key == key,
        )
    )
    return result.scalar_one_or_none()


def get_value(session: Session, group: str, key: str) -> str | None:
    """Get the value stored under group/key, or None."""
    entry = get_entry(session, group, key)
    return entry.value if entry else None


def set_value(session: Session, group: str, key: str, value: str) -> ConfigEntryDB:
    """
    Insert or update a configuration entry.

    If an entry with the same group+key exists, updates it.
    Otherwise creates a new record.
    """
    entry = get_entry(session, group, key)
    if entry:
        entry.value = value
    else:
        entry = ConfigEntryDB(group=group, key=key, value=value)
        session.add(entry)

    session.flush()
    return entry


def unset_value(session: Session, group: str, key: str) -> bool:
    """
    Delete a configuration entry.

    Returns True if deleted, False if not found.
    """
    result = session.execute(
        delete(ConfigEntryDB).where(
            ConfigEntryDB.group == group,
            ConfigEntryDB.key == key,
        )
    )
    return result.rowcount > 0


def list_keys(session: Session, group: str, prefix: str = "") -> list[str]:
    """List keys in a group starting with prefix, sorted."""
    statement = select(ConfigEntryDB.key).where(ConfigEntryDB.group == group)
    if prefix:
        # autoescape keeps "_" and "%" in prefixes literal
        statement = statement.where(ConfigEntryDB.key.startswith(prefix, autoescape=True))
    result = session.execute(statement.order_by(ConfigEntryDB.key))
    return list(result.scalars().all())


def unset_prefix(session: Session, group: str, prefix: str) -> int:
    """
    Delete every entry in a group whose key starts with prefix.

    Returns:
        Number of entries deleted
    """
    if not prefix:
        msg = "Refusing to delete an entire config group with an empty prefix"
        raise ValueError(msg)

    result = session.execute(
        delete(ConfigEntryDB).where(
            ConfigEntryDB.group == group,
            ConfigEntryDB.key.startswith(prefix, autoescape=True),
        )
    )
    return result.rowcount

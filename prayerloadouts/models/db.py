"""
SQLAlchemy ORM models for persistent storage.

The configuration store is a flat (group, key) -> value table. Loadouts
are encoded into it by the loadout codec; this layer knows nothing about
loadouts.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ConfigEntryDB(Base):
    """
    A single configuration entry.

    Each (group, key) pair holds exactly one string value.
    """

    __tablename__ = "config_entries"
    __table_args__ = (UniqueConstraint("group", "key", name="uq_config_group_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(512), index=True)
    value: Mapped[str] = mapped_column(Text)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<ConfigEntryDB(group={self.group}, key={self.key})>"

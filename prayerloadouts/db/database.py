"""
Database engine and session management.

Provides the SQLAlchemy engine and session factory backing the SQL
configuration store. Engines are built from Settings.database_url by
prayerloadouts.main.create_config_store.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from prayerloadouts.models.db import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL."""
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Session factory bound to an engine."""
    return sessionmaker(bind, class_=Session, expire_on_commit=False)


@contextmanager
def get_session(factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    Provide a session that commits on success and rolls back on error.

    Any other exception leaves the session uncommitted; closing it
    discards the pending work.

    Usage:
        with get_session(factory) as session:
            set_value(session, "prayerloadouts", "last_loadout", "Melee")
    """
    with factory() as session:
        try:
            yield session
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise


def init_db(bind: Engine) -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models.
    Should be called once at startup.
    """
    Base.metadata.create_all(bind)


def drop_db(bind: Engine) -> None:
    """
    Drop all database tables.

    WARNING: Destroys all data. Use only for testing.
    """
    Base.metadata.drop_all(bind)

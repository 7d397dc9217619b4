"""
SQLAlchemy engine and session management for the delivery receipt store.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.orm import Session, sessionmaker

from delivery_receipts.constants import DB_NAME, SQLITE_BUSY_TIMEOUT_SECONDS
from delivery_receipts.errors import StorageUnavailable

# Module-level engine instance (lazy-initialized)
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_db_path: Union[str, Path] = DB_NAME


def create_db_engine(db_path: Union[str, Path]) -> Engine:
    """Create an engine for a SQLite file whose transactions take the write lock up front.

    pysqlite's own transaction handling is switched off so that every
    transaction starts with BEGIN IMMEDIATE. Other connections to the same
    file then wait instead of reading a half-applied insert/trim.
    """
    path = Path(db_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageUnavailable(f"Cannot create directory for {path}: {e}") from e

    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def configure(db_path: Union[str, Path]) -> None:
    """Point the store at a database file. Takes effect on the next get_engine()."""
    global _db_path
    reset_engine()
    _db_path = db_path


def get_engine() -> Engine:
    """Get the SQLAlchemy engine, creating it if necessary."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_db_engine(_db_path)
        _session_factory = sessionmaker(bind=_engine)
    return _engine


def set_engine(engine: Engine) -> None:
    """Set a custom engine (for testing)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = sessionmaker(bind=engine)


def reset_engine() -> None:
    """Reset the engine to None (for testing)."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a session context manager for database operations.

    Usage:
        with get_session() as session:
            session.add(obj)
            # commit happens automatically on successful exit
    """
    if _session_factory is None:
        get_engine()  # Initialize engine and session factory

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

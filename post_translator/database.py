"""
Database Sessions

One SQLite engine per process, opened lazily from database.path. The API opens
a session per request and every poll check opens its own, so sessions never
cross threads; concurrent writers (callback vs. poll) are serialized by
SQLite's lock, which busy_timeout waits on instead of failing.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from post_translator.config import DATABASE_ECHO, DATABASE_PATH
from post_translator.models.base import Base


# Milliseconds a writer waits for the lock held by the other completion path
SQLITE_BUSY_TIMEOUT_MS = 30000

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def set_sqlite_pragma(dbapi_conn, connection_record) -> None:
    """
    Per-connection SQLite settings.

    foreign_keys must be on for ON DELETE CASCADE (post_translations) and
    ON DELETE SET NULL (translation_requests) to take effect.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


def init_database(database_path: str = DATABASE_PATH, echo: bool = DATABASE_ECHO) -> Engine:
    """
    Open the SQLite engine and session factory.

    Args:
        database_path: SQLite file; parent directories are created
        echo: Log emitted SQL

    Returns:
        Engine: The process-wide engine
    """
    global _engine, _session_factory

    Path(database_path).parent.mkdir(parents=True, exist_ok=True)

    _engine = create_engine(
        f"sqlite:///{database_path}",
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_MS / 1000},
    )
    event.listen(_engine, "connect", set_sqlite_pragma)

    # Rows outlive their session: poll jobs read them after the commit
    _session_factory = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    return _engine


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Unit of work: commit on clean exit, roll back and re-raise on error.

    Services that own their transaction (CompletionService) commit inside
    the block; the final commit is then a no-op.
    """
    if _session_factory is None:
        init_database()

    session = _session_factory()
    try:
        yield session
        if session.is_active:
            session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency wrapping get_session()."""
    with get_session() as session:
        yield session


def create_tables() -> None:
    """Create missing tables; existing ones are left as they are."""
    if _engine is None:
        init_database()
    Base.metadata.create_all(_engine)

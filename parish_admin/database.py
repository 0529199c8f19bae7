from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import settings


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_mysql(database_url: str) -> bool:
    return database_url.startswith("mysql")


def _ensure_sqlite_dir(database_url: str) -> None:
    """
    Ensure the parent folder exists for SQLite file-based DB URLs like:
      sqlite:///./data/parish.sqlite
      sqlite:////absolute/path/to/db.sqlite
    """
    if not database_url.startswith("sqlite:///"):
        return

    path = database_url.replace("sqlite:///", "", 1)
    if path in ("", ":memory:"):
        return
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)


def _sqlite_pragmas(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=5000;")  # reduce 'database is locked'
        cursor.close()


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create an engine for the bootstrap database.

    - Defaults to settings.resolved_database_url (DATABASE_URL, else DB_PATH)
    - SQLite gets its folder created and a few pragmas
    - MySQL needs a driver (e.g. pymysql) installed by the operator
    """
    url = database_url or settings.resolved_database_url

    if _is_sqlite(url):
        _ensure_sqlite_dir(url)

    connect_args = {"check_same_thread": False} if _is_sqlite(url) else {}
    kwargs = {"echo": False, "connect_args": connect_args, "pool_pre_ping": True}
    if _is_mysql(url):
        # MySQL drops idle connections after wait_timeout
        kwargs["pool_recycle"] = 3600

    engine = create_engine(url, **kwargs)

    if _is_sqlite(url):
        _sqlite_pragmas(engine)

    return engine


_engine: Optional[Engine] = None


def default_engine() -> Engine:
    """Process-wide engine, created on first use."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


def register_models() -> None:
    """
    Import every table model so SQLModel.metadata knows about it.
    """
    from .models.tables import CategoryRow, UserAccount  # noqa: F401


def init_db(engine: Optional[Engine] = None, create_tables: bool = True) -> Engine:
    """
    Register models, then create missing tables.
    Non-destructive: create_all will not drop or alter existing tables.
    """
    eng = engine or default_engine()
    register_models()
    if create_tables:
        SQLModel.metadata.create_all(eng)
    return eng


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """
    Context manager for scripts that need commit/rollback safety.

    Usage:
        with session_scope() as db:
            db.add(...)
    """
    session = Session(engine or default_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

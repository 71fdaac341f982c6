"""
Database connection and initialization.
No module-level connection; callers pass the path they were configured with.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import StoreUnavailableError
from .schema import all_schema_sql

logger = logging.getLogger(__name__)


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """
    Return a new SQLite connection with foreign keys enforced.
    Use as context manager or ensure close() is called.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        # Request handlers may run on a different worker thread than the one that opened it.
        conn = sqlite3.connect(str(path), check_same_thread=False)
    except sqlite3.Error as e:
        raise StoreUnavailableError(str(e)) from e
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def connection(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str | Path) -> None:
    """Create or ensure all tables exist. Idempotent."""
    path = Path(db_path)
    with connection(path) as conn:
        conn.executescript(all_schema_sql())
        conn.commit()
    logger.info("Database ready at %s", path)

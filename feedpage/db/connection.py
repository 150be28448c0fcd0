"""Connection management for the feed reader cache database."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from ..errors import PathDoesNotExistError, SetupError

REQUIRED_TABLES = ("rss_feed", "rss_item")


@contextmanager
def get_connection(db_path: Path) -> Generator[sqlite3.Connection, None, None]:
    """Open the cache database, closing the connection on exit."""
    if not db_path.exists():
        raise PathDoesNotExistError(db_path)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def validate_connection(db_path: Path) -> None:
    """
    Check that the cache database can be opened and has the feed tables.

    Raises:
        SetupError: If the file is not a usable cache database
    """
    try:
        with get_connection(db_path) as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
    except sqlite3.DatabaseError as e:
        raise SetupError(f"Cannot read cache database {db_path}: {e}") from e
    tables = {row["name"] for row in rows}
    missing = [t for t in REQUIRED_TABLES if t not in tables]
    if missing:
        raise SetupError(f"Cache database {db_path} is missing tables: {', '.join(missing)}")

"""
SQLite database integration and simple migration system.

This module provides functions for locating the database file
(``get_database_path``), obtaining a connection (``get_connection``)
and applying migrations on application start (``init_db``).  The
database path is always passed in explicitly; the application factory
resolves it once from the settings and hands it to the store.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# Fixed width so that text comparison in SQL matches chronological order.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: songs catalog
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS songs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            group_name TEXT NOT NULL,
            song_name TEXT NOT NULL,
            release_date TIMESTAMP NOT NULL,
            text TEXT NOT NULL DEFAULT '',
            link TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            UNIQUE(group_name, song_name)
        );
        """,
    ),
    # Migration 2: listing is ordered by creation time
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_songs_created_at ON songs(created_at);
        CREATE INDEX IF NOT EXISTS idx_songs_release_date ON songs(release_date);
        """,
    ),
]


def get_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # music_library_api/
    return str((base_dir / db_url).resolve())


def _casefold(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.casefold()


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  A ``casefold`` SQL function is registered because SQLite's
    own ``lower``/``LIKE`` only fold ASCII characters.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def to_db_timestamp(value: datetime) -> str:
    """Format ``value`` as naive UTC text for storage."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(TIMESTAMP_FORMAT)


def from_db_timestamp(value: str) -> datetime:
    """Parse a timestamp written by ``to_db_timestamp``."""
    return datetime.strptime(value, TIMESTAMP_FORMAT)


def init_db(db_path: str) -> None:
    """Initialise the database and apply pending migrations.

    Creates the directory holding the database file when it is
    missing, then creates the ``migrations`` table if it does not exist,
    checks the current schema version and applies any newer entries of
    ``MIGRATIONS``.  To change the schema, append a migration with an
    incremented version number.
    """
    directory = os.path.dirname(db_path)
    if directory and not os.path.isdir(directory):
        os.makedirs(directory, exist_ok=True)
        logger.info("Created database directory %s", directory)

    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version

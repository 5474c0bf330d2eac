"""
SQLite database integration and simple migration system.

This module provides ``get_connection`` and the ``get_cursor`` context
manager used by the query layer, and ``init_db`` which applies the
schema migrations when the application starts.  Every function takes
the database location explicitly so that tests can point the whole
stack at a temporary file.

Applied migration versions are recorded in the ``migrations`` table
and new migrations are executed in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: users and their tags
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            username TEXT PRIMARY KEY,
            passwdhash TEXT NOT NULL,
            email TEXT NOT NULL,
            phone_number TEXT,
            age INTEGER,
            sex TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS user_tags (
            username TEXT NOT NULL,
            tag_name TEXT NOT NULL,
            tag_type TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (username, tag_name),
            FOREIGN KEY(username) REFERENCES users(username)
        );
        """,
    ),
    # Migration 2: profile and body measurements
    (
        2,
        """
        ALTER TABLE users ADD COLUMN name TEXT;
        ALTER TABLE users ADD COLUMN surname TEXT;
        ALTER TABLE users ADD COLUMN weight REAL;
        ALTER TABLE users ADD COLUMN height REAL;
        ALTER TABLE users ADD COLUMN bmi REAL;
        """,
    ),
    # Migration 3: tag listings are always per user
    (
        3,
        """
        CREATE INDEX IF NOT EXISTS idx_user_tags_username ON user_tags(username);
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is.  Relative paths are resolved
    against the project root.  Every statement opens its own
    connection, so an in-memory database (``:memory:``) would be empty
    on each one and is rejected with ``ValueError``.
    """
    if database_url == ":memory:":
        raise ValueError("DATABASE_URL must name a file; in-memory databases are not supported")
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def get_connection(database_url: str) -> sqlite3.Connection:
    """Open a new SQLite connection with rows addressable by column name.

    Foreign key enforcement is switched on for the lifetime of the
    connection; SQLite leaves it off by default.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(database_url: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(database_url)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(database_url: str) -> int:
    """Create the database if needed and apply pending migrations.

    Returns the schema version after all migrations have run.  To
    change the schema append a new entry to ``MIGRATIONS`` with the
    next version number; never edit an applied one.
    """
    with get_cursor(database_url) as cursor:
        cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                current_version = version
    return current_version

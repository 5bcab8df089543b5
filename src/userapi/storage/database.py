"""
=============================================================================
DATABASE CONNECTION
=============================================================================

The users table lives in a single SQLite file. One connection is opened
at startup and shared by every worker thread:

    ┌──────────┐   ┌──────────┐   ┌──────────┐
    │ Worker-0 │   │ Worker-1 │   │ Worker-2 │
    └────┬─────┘   └────┬─────┘   └────┬─────┘
         └──────────────┼──────────────┘
                        ▼
            sqlite3.Connection (check_same_thread=False,
                        │       isolation_level=None)
                        ▼
                    users.db

    check_same_thread=False   the connection is created on the main
                              thread but used from workers
    isolation_level=None      autocommit; every statement is its own
                              transaction
    row_factory=sqlite3.Row   columns by name: row["name"]

SQLite's own serialized threading mode keeps concurrent statements on
the shared connection safe; there is no lock on top.

=============================================================================
"""

import logging
import sqlite3

from ..errors import StorageError


logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT,
    age  INTEGER
);
"""


def create_tables(conn: sqlite3.Connection) -> None:
    """
    Create the schema. Safe to run on every start (IF NOT EXISTS).

    Raises:
        StorageError: If the script fails.
    """
    try:
        conn.executescript(SCHEMA_SQL)
    except sqlite3.Error as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise StorageError(f"Failed to initialize schema: {e}") from e
    logger.info("Database schema initialized")


def open_database(path: str) -> sqlite3.Connection:
    """
    Open (creating if needed) the SQLite database at ``path``.

    Args:
        path: File path, or ":memory:" for a private in-memory database.

    Returns:
        A connection ready to be shared between threads, schema applied.

    Raises:
        StorageError: If the file cannot be opened or initialized.
    """
    try:
        conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    except sqlite3.Error as e:
        logger.error(f"Failed to open database {path}: {e}")
        raise StorageError(f"Failed to open database {path}: {e}") from e

    conn.row_factory = sqlite3.Row

    try:
        create_tables(conn)
    except StorageError:
        conn.close()
        raise

    logger.info(f"Opened database {path}")
    return conn

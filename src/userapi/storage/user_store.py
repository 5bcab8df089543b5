"""
=============================================================================
USER STORE
=============================================================================

All SQL touching the users table lives here. Handlers call methods and
get User objects back; they never see a cursor.

    ┌─────────────────────┬──────────────────────────────────────────────┐
    │ create(name, age)   │ INSERT ... RETURNING id, name, age           │
    │ list()              │ SELECT ... ORDER BY id                       │
    │ get(id)             │ SELECT ... WHERE id = ?     → NotFoundError  │
    │ update(id, n, a)    │ UPDATE ... RETURNING ...    → NotFoundError  │
    │ delete(id)          │ DELETE ... WHERE id = ?     → NotFoundError  │
    └─────────────────────┴──────────────────────────────────────────────┘

Each write is exactly one statement. RETURNING hands back the row the
statement itself wrote, so two workers inserting at the same moment can
never read each other's id (which cursor.lastrowid on a shared connection
could).

Values are always bound with "?" placeholders, never formatted into SQL.
Binding an int outside SQLite's 64-bit INTEGER range raises OverflowError in
the driver; it is reported as StorageError like any sqlite3.Error.

=============================================================================
"""

import logging
import sqlite3
from typing import List

from ..errors import NotFoundError, StorageError
from ..users.models import User
from .database import open_database


logger = logging.getLogger(__name__)


class UserStore:
    """
    CRUD access to the users table over one shared connection.

        store = UserStore.open("users.db")
        alice = store.create("Alice", 30)
        store.get(alice.id)
        store.close()
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    @classmethod
    def open(cls, path: str) -> "UserStore":
        """Open ``path`` with open_database() and wrap it."""
        return cls(open_database(path))

    # ─────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────

    def create(self, name: str, age: int) -> User:
        sql = "INSERT INTO users (name, age) VALUES (?, ?) RETURNING id, name, age"
        try:
            rows = self._conn.execute(sql, (name, age)).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Failed to create user {name!r}: {e}")
            raise StorageError(f"Failed to create user: {e}") from e

        user = User.from_row(rows[0])
        logger.debug(f"Created user {user.id}")
        return user

    def update(self, user_id: int, name: str, age: int) -> User:
        """
        Replace name and age of an existing user.

        Raises:
            NotFoundError: If no row has ``user_id``.
            StorageError: On any database failure.
        """
        sql = "UPDATE users SET name = ?, age = ? WHERE id = ? RETURNING id, name, age"
        try:
            rows = self._conn.execute(sql, (name, age, user_id)).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Failed to update user {user_id}: {e}")
            raise StorageError(f"Failed to update user {user_id}: {e}") from e

        if not rows:
            raise NotFoundError(f"User {user_id} not found")
        return User.from_row(rows[0])

    def delete(self, user_id: int) -> None:
        """
        Raises:
            NotFoundError: If no row has ``user_id``.
            StorageError: On any database failure.
        """
        try:
            cursor = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise StorageError(f"Failed to delete user {user_id}: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(f"User {user_id} not found")
        logger.debug(f"Deleted user {user_id}")

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    def list(self) -> List[User]:
        """Every user, ascending id."""
        try:
            rows = self._conn.execute("SELECT id, name, age FROM users ORDER BY id").fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to list users: {e}")
            raise StorageError(f"Failed to list users: {e}") from e
        return [User.from_row(row) for row in rows]

    def get(self, user_id: int) -> User:
        """
        Raises:
            NotFoundError: If no row has ``user_id``.
            StorageError: On any database failure.
        """
        try:
            rows = self._conn.execute(
                "SELECT id, name, age FROM users WHERE id = ?", (user_id,)
            ).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise StorageError(f"Failed to fetch user {user_id}: {e}") from e

        if not rows:
            raise NotFoundError(f"User {user_id} not found")
        return User.from_row(rows[0])

    def close(self) -> None:
        self._conn.close()
        logger.info("Database connection closed")

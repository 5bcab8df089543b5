"""
Unit tests for the SQLite user store.
"""

import sqlite3

import pytest

from userapi.errors import NotFoundError, StorageError
from userapi.storage import UserStore, open_database
from userapi.users.models import User


class TestOpenDatabase:
    """Tests for opening the shared connection."""

    def test_creates_users_table(self, tmp_path):
        conn = open_database(str(tmp_path / "users.db"))
        try:
            columns = [row["name"] for row in conn.execute("PRAGMA table_info(users)")]
        finally:
            conn.close()

        assert columns == ["id", "name", "age"]

    def test_schema_is_idempotent(self, tmp_path):
        path = str(tmp_path / "users.db")
        first = UserStore.open(path)
        first.create("Alice", 30)
        first.close()

        store = UserStore.open(path)
        try:
            assert [u.name for u in store.list()] == ["Alice"]
        finally:
            store.close()

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        with pytest.raises(StorageError):
            open_database(str(tmp_path / "missing-dir" / "users.db"))


class TestUserStore:
    """Tests for CRUD operations."""

    def test_create_assigns_positive_ids(self, store: UserStore):
        alice = store.create("Alice", 30)
        bob = store.create("Bob", 41)

        assert alice == User(id=alice.id, name="Alice", age=30)
        assert alice.id > 0
        assert bob.id > alice.id

    def test_ids_not_reused_after_delete(self, store: UserStore):
        first = store.create("Alice", 30)
        store.delete(first.id)

        second = store.create("Bob", 41)

        assert second.id > first.id

    def test_list_ascending_id(self, store: UserStore):
        created = [store.create(name, age) for name, age in [("A", 1), ("B", 2), ("C", 3)]]

        assert store.list() == created

    def test_list_empty(self, store: UserStore):
        assert store.list() == []

    def test_get(self, store: UserStore):
        alice = store.create("Alice", 30)

        assert store.get(alice.id) == alice

    def test_get_missing(self, store: UserStore):
        with pytest.raises(NotFoundError):
            store.get(999)

    def test_update_changes_only_that_row(self, store: UserStore):
        alice = store.create("Alice", 30)
        bob = store.create("Bob", 41)

        updated = store.update(alice.id, "Alicia", 31)

        assert updated == User(id=alice.id, name="Alicia", age=31)
        assert store.get(alice.id) == updated
        assert store.get(bob.id) == bob

    def test_update_missing(self, store: UserStore):
        with pytest.raises(NotFoundError):
            store.update(999, "Nobody", 1)

    def test_delete(self, store: UserStore):
        alice = store.create("Alice", 30)

        store.delete(alice.id)

        with pytest.raises(NotFoundError):
            store.get(alice.id)

    def test_delete_twice(self, store: UserStore):
        alice = store.create("Alice", 30)
        store.delete(alice.id)

        with pytest.raises(NotFoundError):
            store.delete(alice.id)

    def test_stores_unvalidated_values(self, store: UserStore):
        """The store itself enforces no policy."""
        user = store.create("", -5)

        assert store.get(user.id) == User(id=user.id, name="", age=-5)

    def test_database_failure_becomes_storage_error(self, tmp_path):
        conn = sqlite3.connect(str(tmp_path / "broken.db"), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        store = UserStore(conn)  # no schema: every statement fails

        with pytest.raises(StorageError):
            store.list()
        with pytest.raises(StorageError):
            store.create("Alice", 30)

        store.close()

    def test_closed_store_raises_storage_error(self, tmp_path):
        store = UserStore.open(str(tmp_path / "users.db"))
        store.close()

        with pytest.raises(StorageError):
            store.get(1)

    @pytest.mark.parametrize("operation", [
        lambda store: store.get(2 ** 70),
        lambda store: store.delete(2 ** 70),
        lambda store: store.update(2 ** 70, "Alice", 30),
        lambda store: store.create("Alice", 10 ** 30),
    ])
    def test_integer_beyond_sqlite_range_is_storage_error(self, store: UserStore, operation):
        with pytest.raises(StorageError):
            operation(store)

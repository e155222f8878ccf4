"""Unit tests for user store backends."""

from pathlib import Path

import pytest

from lights_control.auth.authenticator import Authenticator
from lights_control.auth.models import (
    Authenticated,
    Credentials,
    Rejected,
    RejectReason,
    StoreUnavailable,
    UserRecord,
)
from lights_control.auth.stores import InMemoryUserStore, SqliteUserStore
from lights_control.errors import UserStoreError


class TestInMemoryUserStore:
    """Test InMemoryUserStore functionality."""

    def test_find_existing_user(self) -> None:
        record = UserRecord(
            user_id=1, stored_username="demo", stored_password="demo", role_id=2
        )
        store = InMemoryUserStore([record])

        assert store.find_by_username("demo") is record
        assert store.find_by_username("other") is None

    def test_add_replaces_same_username(self) -> None:
        """Test usernames stay unique in the store."""
        store = InMemoryUserStore()
        store.add(UserRecord(1, "demo", "old", 2))
        store.add(UserRecord(1, "demo", "new", 2))

        assert store.size() == 1
        record = store.find_by_username("demo")
        assert record is not None
        assert record.stored_password == "new"


class TestSqliteUserStore:
    """Test SqliteUserStore against a real SQLite file."""

    @pytest.fixture
    def store(self, tmp_path: Path) -> SqliteUserStore:
        store = SqliteUserStore(tmp_path / "data" / "lightscontrol.sqlite")
        store.init_schema()
        return store

    def test_init_schema_creates_database(self, store: SqliteUserStore) -> None:
        assert store.database_path.exists()
        # Running twice is harmless
        store.init_schema()

    def test_find_by_username(self, store: SqliteUserStore) -> None:
        """Test raw columns are mapped to a UserRecord."""
        role_id = store.add_role("admin")
        user_id = store.add_user("demo", "demo", role_id)

        record = store.find_by_username("demo")

        assert record == UserRecord(
            user_id=user_id,
            stored_username="demo",
            stored_password="demo",
            role_id=role_id,
        )

    def test_find_unknown_user(self, store: SqliteUserStore) -> None:
        store.add_user("demo", "demo")

        assert store.find_by_username("ghost") is None
        assert store.find_by_username("") is None

    def test_lookup_is_parameterised(self, store: SqliteUserStore) -> None:
        """Test SQL metacharacters in the username are treated as data."""
        store.add_user("demo", "demo")

        assert store.find_by_username("' OR '1'='1") is None

    def test_duplicate_username_rejected(self, store: SqliteUserStore) -> None:
        store.add_user("demo", "demo")

        with pytest.raises(UserStoreError):
            store.add_user("demo", "other")

    def test_missing_database_raises(self, tmp_path: Path) -> None:
        """Test a missing database file is a store fault, not an empty store."""
        store = SqliteUserStore(tmp_path / "missing.sqlite")

        with pytest.raises(UserStoreError):
            store.find_by_username("demo")

        assert not (tmp_path / "missing.sqlite").exists()

    def test_init_schema_unwritable_directory(self, tmp_path: Path) -> None:
        """Test directory creation failures are reported as store errors."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = SqliteUserStore(blocker / "data" / "lightscontrol.sqlite")

        with pytest.raises(UserStoreError):
            store.init_schema()

    def test_missing_table_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.sqlite"
        path.touch()
        store = SqliteUserStore(path)

        with pytest.raises(UserStoreError) as exc_info:
            store.find_by_username("demo")

        assert exc_info.value.__cause__ is not None

    def test_corrupt_database_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "corrupt.sqlite"
        path.write_bytes(b"this is not a sqlite database" * 100)
        store = SqliteUserStore(path)

        with pytest.raises(UserStoreError):
            store.find_by_username("demo")

    def test_authenticator_scenarios(self, store: SqliteUserStore) -> None:
        """Test the authenticator end to end against SQLite."""
        role_id = store.add_role("user")
        user_id = store.add_user("demo", "demo", role_id)
        authenticator = Authenticator(store)

        assert authenticator.authenticate(Credentials("demo", "demo")) == (
            Authenticated(user_id=user_id, role_id=role_id)
        )
        assert authenticator.authenticate(Credentials("demo", "wrong")) == Rejected(
            RejectReason.PASSWORD_INVALID
        )
        assert authenticator.authenticate(Credentials("ghost", "demo")) == Rejected(
            RejectReason.USERNAME_INVALID
        )

    def test_authenticator_with_unavailable_database(self, tmp_path: Path) -> None:
        authenticator = Authenticator(SqliteUserStore(tmp_path / "missing.sqlite"))

        result = authenticator.authenticate(Credentials("demo", "demo"))

        assert isinstance(result, StoreUnavailable)

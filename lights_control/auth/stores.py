"""User store backends."""

import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from ..errors import UserStoreError
from .models import UserRecord

logger = structlog.get_logger()


class InMemoryUserStore:
    """Dictionary-backed user store for development and tests."""

    def __init__(self, records: Iterable[UserRecord] = ()):
        self._records: dict[str, UserRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: UserRecord) -> None:
        """Add or replace the record for its username."""
        self._records[record.stored_username] = record

    def find_by_username(self, username: str) -> UserRecord | None:
        return self._records.get(username)

    def size(self) -> int:
        return len(self._records)


class SqliteUserStore:
    """User store reading the panel's SQLite user table.

    The table layout is the one shipped with the panel database:
    ``tbl_user(idtbl_user, tbl_user_login, tbl_user_password,
    tbl_roles_idtbl_role)`` with roles in ``tbl_role``.
    """

    def __init__(self, database_path: str | Path, timeout: float = 5.0):
        self.database_path = Path(database_path)
        self.timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.database_path), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def init_schema(self) -> None:
        """Create the role and user tables if they do not exist."""
        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS tbl_role (
                        idtbl_role INTEGER PRIMARY KEY AUTOINCREMENT,
                        tbl_role_name TEXT NOT NULL
                    );
                    CREATE TABLE IF NOT EXISTS tbl_user (
                        idtbl_user INTEGER PRIMARY KEY AUTOINCREMENT,
                        tbl_user_login TEXT NOT NULL UNIQUE,
                        tbl_user_password TEXT NOT NULL,
                        tbl_roles_idtbl_role INTEGER
                            REFERENCES tbl_role (idtbl_role)
                    );
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise UserStoreError(f"Failed to initialise user schema: {e}") from e

        logger.info("User schema ready", database=str(self.database_path))

    def add_role(self, name: str) -> int:
        """Insert a role and return its id."""
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    "INSERT INTO tbl_role (tbl_role_name) VALUES (?)", (name,)
                )
                conn.commit()
                return int(cursor.lastrowid)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise UserStoreError(f"Failed to add role {name!r}: {e}") from e

    def add_user(self, username: str, password: str, role_id: Any = None) -> int:
        """Insert a user and return its id."""
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO tbl_user
                        (tbl_user_login, tbl_user_password, tbl_roles_idtbl_role)
                    VALUES (?, ?, ?)
                    """,
                    (username, password, role_id),
                )
                conn.commit()
                return int(cursor.lastrowid)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise UserStoreError(f"Failed to add user {username!r}: {e}") from e

    def find_by_username(self, username: str) -> UserRecord | None:
        """Look up a user by login name.

        Raises:
            UserStoreError: if the database cannot be opened or queried
        """
        # sqlite3.connect would silently create an empty database
        if not self.database_path.exists():
            raise UserStoreError(f"User database not found: {self.database_path}")

        try:
            conn = self._connect()
            try:
                row = conn.execute(
                    """
                    SELECT idtbl_user, tbl_user_login, tbl_user_password,
                           tbl_roles_idtbl_role
                    FROM tbl_user
                    WHERE tbl_user_login = ?
                    LIMIT 1
                    """,
                    (username,),
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise UserStoreError(f"User lookup failed: {e}") from e

        if row is None:
            return None

        return UserRecord(
            user_id=row["idtbl_user"],
            stored_username=row["tbl_user_login"],
            stored_password=row["tbl_user_password"],
            role_id=row["tbl_roles_idtbl_role"],
        )

"""SQLite-backed persistence for user credentials."""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import closing, contextmanager
from typing import Iterator, List, Optional

from .config import StoreConfig
from .engine import SQLiteEngine
from .errors import (
    ConstraintError,
    NotFoundError,
    SchemaError,
    StoreConnectionError,
    TransactionError,
)
from .models import User
from .security import hash_password, verify_password

logger = logging.getLogger("credstore.store")


def _transaction_error(operation: str, exc: sqlite3.Error) -> TransactionError:
    if isinstance(exc, sqlite3.IntegrityError):
        error: TransactionError = ConstraintError(operation, str(exc))
    else:
        error = TransactionError(operation, str(exc))
    logger.warning("%s failed: %s", operation, exc)
    return error


class CredentialStore:
    """Wrapper around a live SQLite connection holding the users table."""

    def __init__(self, conn: sqlite3.Connection, config: StoreConfig) -> None:
        self._conn: Optional[sqlite3.Connection] = conn
        self._config = config
        self._table = config.table_name
        self._lock = threading.Lock()

    @classmethod
    def connect(
        cls,
        location: Optional[str] = None,
        *,
        engine: Optional[SQLiteEngine] = None,
        config: Optional[StoreConfig] = None,
    ) -> "CredentialStore":
        """Open ``location``, check that it responds and create the users table."""

        config = config or StoreConfig()
        location = config.location if location is None else location
        engine = engine or SQLiteEngine()

        try:
            conn = engine.open(location)
        except sqlite3.Error as exc:
            logger.warning("Unable to open database at %s: %s", location, exc)
            raise StoreConnectionError("connect", f"cannot open {location!r}: {exc}") from exc

        try:
            conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as exc:
            conn.close()
            logger.warning("Database at %s did not respond: %s", location, exc)
            raise StoreConnectionError("connect", f"ping failed for {location!r}: {exc}") from exc

        try:
            with conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {config.table_name} "
                    "(email TEXT PRIMARY KEY, password TEXT NOT NULL)"
                )
        except sqlite3.Error as exc:
            conn.close()
            logger.warning("Unable to create table %s at %s: %s", config.table_name, location, exc)
            raise SchemaError("connect", f"cannot create table {config.table_name!r}: {exc}") from exc

        logger.info("Credential store ready at %s (table %s)", location, config.table_name)
        return cls(conn, config)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> "CredentialStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Record operations
    # ------------------------------------------------------------------
    def add(self, user: User) -> None:
        """Insert ``user``; a duplicate email raises :class:`ConstraintError`."""

        password = self._prepare_password(user.password)
        with self._transaction("add") as conn:
            with closing(conn.cursor()) as cursor:
                cursor.execute(
                    f"INSERT INTO {self._table} (email, password) VALUES (?, ?)",
                    (user.email, password),
                )
        logger.debug("Added user %s", user.email)

    def get(self, email: str) -> User:
        with self._use_connection("get") as conn:
            try:
                with closing(conn.cursor()) as cursor:
                    cursor.execute(
                        f"SELECT email, password FROM {self._table} WHERE email = ?",
                        (email,),
                    )
                    row = cursor.fetchone()
            except sqlite3.Error as exc:
                raise _transaction_error("get", exc) from exc

        if row is None:
            raise NotFoundError("get", email)
        return User(email=str(row["email"]), password=str(row["password"]))

    def update(self, user: User, *, current_email: Optional[str] = None) -> None:
        """Replace the email and password of an existing user.

        The row is matched on ``current_email`` when given, otherwise on
        ``user.email``. Raises :class:`NotFoundError` when no row matches.
        """

        match_email = current_email if current_email is not None else user.email
        password = self._prepare_password(user.password)
        with self._transaction("update") as conn:
            with closing(conn.cursor()) as cursor:
                cursor.execute(
                    f"UPDATE {self._table} SET email = ?, password = ? WHERE email = ?",
                    (user.email, password, match_email),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("update", match_email)
        if match_email != user.email:
            logger.debug("Renamed user %s to %s", match_email, user.email)
        else:
            logger.debug("Updated user %s", user.email)

    def delete(self, email: str) -> bool:
        """Remove the user with ``email``; returns ``False`` if there was none."""

        with self._transaction("delete") as conn:
            with closing(conn.cursor()) as cursor:
                cursor.execute(f"DELETE FROM {self._table} WHERE email = ?", (email,))
                removed = cursor.rowcount > 0
        logger.debug("Deleted user %s (existed: %s)", email, removed)
        return removed

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------
    def authenticate(self, email: str, password: str) -> bool:
        try:
            stored = self.get(email)
        except NotFoundError:
            return False
        return verify_password(password, stored.password)

    def count(self) -> int:
        with self._use_connection("count") as conn:
            try:
                with closing(conn.cursor()) as cursor:
                    cursor.execute(f"SELECT COUNT(*) FROM {self._table}")
                    return int(cursor.fetchone()[0])
            except sqlite3.Error as exc:
                raise _transaction_error("count", exc) from exc

    def emails(self) -> List[str]:
        with self._use_connection("emails") as conn:
            try:
                with closing(conn.cursor()) as cursor:
                    cursor.execute(f"SELECT email FROM {self._table} ORDER BY email")
                    return [str(row["email"]) for row in cursor.fetchall()]
            except sqlite3.Error as exc:
                raise _transaction_error("emails", exc) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _prepare_password(self, password: str) -> str:
        if self._config.hash_passwords and password is not None:
            return hash_password(password)
        return password

    @contextmanager
    def _use_connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._conn is None:
                raise StoreConnectionError(operation, "store is closed")
            yield self._conn

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Run the body in a transaction that commits on success and rolls back otherwise."""

        with self._use_connection(operation) as conn:
            try:
                with conn:
                    yield conn
            except sqlite3.Error as exc:
                raise _transaction_error(operation, exc) from exc


def connect(
    location: Optional[str] = None,
    *,
    engine: Optional[SQLiteEngine] = None,
    config: Optional[StoreConfig] = None,
) -> CredentialStore:
    """Open a :class:`CredentialStore`; see :meth:`CredentialStore.connect`."""

    return CredentialStore.connect(location, engine=engine, config=config)


__all__ = ["CredentialStore", "connect"]

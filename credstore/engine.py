"""Access to the embedded SQLite engine."""
from __future__ import annotations

import sqlite3


class SQLiteEngine:
    """Opens SQLite connections for a :class:`~credstore.store.CredentialStore`.

    Locations beginning with ``file:`` are treated as SQLite URIs so that
    ``file::memory:`` and query parameters such as ``?mode=ro`` are honoured.
    Everything else is handed to :func:`sqlite3.connect` as a plain path.
    """

    def __init__(self, *, timeout: float = 5.0) -> None:
        self._timeout = timeout

    def open(self, location: str) -> sqlite3.Connection:
        conn = sqlite3.connect(
            location,
            timeout=self._timeout,
            uri=location.startswith("file:"),
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        return conn


__all__ = ["SQLiteEngine"]

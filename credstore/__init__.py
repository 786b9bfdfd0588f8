"""SQLite-backed user credential store."""

from __future__ import annotations

from .config import StoreConfig, load_store_config
from .engine import SQLiteEngine
from .errors import (
    ConstraintError,
    NotFoundError,
    SchemaError,
    StoreConnectionError,
    StoreError,
    TransactionError,
)
from .models import User
from .store import CredentialStore, connect

__all__ = [
    "ConstraintError",
    "CredentialStore",
    "NotFoundError",
    "SchemaError",
    "SQLiteEngine",
    "StoreConfig",
    "StoreConnectionError",
    "StoreError",
    "TransactionError",
    "User",
    "connect",
    "load_store_config",
]

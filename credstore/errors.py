"""Exceptions raised by the credential store."""
from __future__ import annotations


class StoreError(RuntimeError):
    """Base class for credential store failures.

    ``operation`` names the store call that failed (``"connect"``, ``"add"``...).
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class StoreConnectionError(StoreError):
    """Raised when the database location cannot be opened or does not respond."""


class SchemaError(StoreError):
    """Raised when the users table cannot be created."""


class TransactionError(StoreError):
    """Raised when a statement or its surrounding transaction fails."""


class ConstraintError(TransactionError):
    """Raised when a write violates a table constraint (duplicate email, NULL value)."""


class NotFoundError(StoreError):
    """Raised when no user matches the requested email."""

    def __init__(self, operation: str, email: str) -> None:
        super().__init__(operation, f"no user with email {email!r}")
        self.email = email


__all__ = [
    "StoreError",
    "StoreConnectionError",
    "SchemaError",
    "TransactionError",
    "ConstraintError",
    "NotFoundError",
]

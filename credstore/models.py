"""Domain models for the credential store."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Represents a user credential stored in the database."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"User(email={self.email!r}, password='***')"


__all__ = ["User"]

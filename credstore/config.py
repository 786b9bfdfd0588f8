"""Configuration management for the credential store."""
from __future__ import annotations

import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

DEFAULT_LOCATION = "credstore.sqlite3"
DEFAULT_TABLE_NAME = "users"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _normalise_location(value: str) -> str:
    if value == ":memory:" or value.startswith("file:"):
        return value
    return str(Path(value).expanduser())


@dataclass(frozen=True)
class StoreConfig:
    """Settings for a :class:`~credstore.store.CredentialStore`."""

    location: str = DEFAULT_LOCATION
    table_name: str = DEFAULT_TABLE_NAME
    hash_passwords: bool = False

    def __post_init__(self) -> None:
        if not self.location:
            raise ValueError("Database location must not be empty")
        if not _IDENTIFIER_RE.match(self.table_name):
            raise ValueError(f"Invalid table name {self.table_name!r}")

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "StoreConfig":
        """Create a :class:`StoreConfig` from raw dictionary data."""
        known = {item.name for item in fields(StoreConfig)}
        unknown = set(data.keys()) - known
        if unknown:
            raise ValueError(f"Unknown store configuration fields: {', '.join(sorted(unknown))}")

        location = data.get("location")
        table_name = data.get("table_name")
        hash_passwords = data.get("hash_passwords")
        if hash_passwords is not None and not isinstance(hash_passwords, bool):
            raise ValueError(f"hash_passwords must be true or false, not {hash_passwords!r}")

        return StoreConfig(
            location=_normalise_location(str(location)) if location else DEFAULT_LOCATION,
            table_name=str(table_name) if table_name is not None else DEFAULT_TABLE_NAME,
            hash_passwords=bool(hash_passwords),
        )


def load_store_config(config_path: Path) -> StoreConfig:
    """Load store settings from the ``store`` mapping of a YAML file."""
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping")
    section = raw.get("store") or {}
    if not isinstance(section, dict):
        raise ValueError("The 'store' configuration key must be a mapping")
    return StoreConfig.from_dict(section)


def resolve_config_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the path to the configuration file, if one was requested."""
    if not env_value:
        return None
    return Path(env_value).expanduser().resolve(strict=False)


def resolve_database_location(env_value: Optional[str], config: StoreConfig) -> str:
    """Return the database location, preferring an explicit override."""
    if env_value:
        return _normalise_location(env_value)
    return config.location


__all__ = [
    "DEFAULT_LOCATION",
    "DEFAULT_TABLE_NAME",
    "StoreConfig",
    "load_store_config",
    "resolve_config_path",
    "resolve_database_location",
]

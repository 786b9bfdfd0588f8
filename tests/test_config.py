from __future__ import annotations

from pathlib import Path

import pytest

from credstore.config import (
    DEFAULT_LOCATION,
    StoreConfig,
    load_store_config,
    resolve_config_path,
    resolve_database_location,
)


def test_defaults() -> None:
    config = StoreConfig()
    assert config.location == DEFAULT_LOCATION
    assert config.table_name == "users"
    assert config.hash_passwords is False


@pytest.mark.parametrize("name", ["", "1users", "users; DROP TABLE x", "user-table"])
def test_invalid_table_name_rejected(name: str) -> None:
    with pytest.raises(ValueError):
        StoreConfig(table_name=name)


def test_load_store_config(tmp_path: Path) -> None:
    config_path = tmp_path / "credstore.yaml"
    config_path.write_text(
        "store:\n"
        "  location: 'file::memory:'\n"
        "  table_name: accounts\n"
        "  hash_passwords: true\n",
        encoding="utf-8",
    )

    config = load_store_config(config_path)
    assert config == StoreConfig(location="file::memory:", table_name="accounts", hash_passwords=True)


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")
    assert load_store_config(config_path) == StoreConfig()


def test_unknown_keys_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("store:\n  tablename: users\n", encoding="utf-8")
    with pytest.raises(ValueError, match="tablename"):
        load_store_config(config_path)


def test_plain_locations_expand_home() -> None:
    config = StoreConfig.from_dict({"location": "~/creds.sqlite3"})
    assert config.location == str(Path("~/creds.sqlite3").expanduser())


def test_resolve_config_path() -> None:
    assert resolve_config_path(None) is None
    assert resolve_config_path("") is None
    assert resolve_config_path("/etc/credstore.yaml") == Path("/etc/credstore.yaml")


def test_resolve_database_location_prefers_override() -> None:
    config = StoreConfig(location="configured.sqlite3")
    assert resolve_database_location(None, config) == "configured.sqlite3"
    assert resolve_database_location(":memory:", config) == ":memory:"
    assert resolve_database_location("file:override.db?mode=rwc", config) == "file:override.db?mode=rwc"


def test_null_table_name_falls_back_to_default() -> None:
    assert StoreConfig.from_dict({"table_name": None}).table_name == "users"


@pytest.mark.parametrize("value", ["false", "no", "0", 1])
def test_non_boolean_hash_passwords_rejected(value: object) -> None:
    with pytest.raises(ValueError, match="hash_passwords"):
        StoreConfig.from_dict({"hash_passwords": value})


def test_quoted_false_in_yaml_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "credstore.yaml"
    config_path.write_text("store:\n  hash_passwords: 'false'\n  table_name:\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_store_config(config_path)


def test_yaml_booleans_and_empty_values(tmp_path: Path) -> None:
    config_path = tmp_path / "credstore.yaml"
    config_path.write_text("store:\n  hash_passwords: false\n  table_name:\n", encoding="utf-8")
    assert load_store_config(config_path) == StoreConfig()

"""Command-line interface for the credential store."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from getpass import getpass
from typing import Sequence

import yaml

from credstore.config import StoreConfig, load_store_config, resolve_config_path, resolve_database_location
from credstore.errors import StoreError
from credstore.models import User
from credstore.store import CredentialStore

logger = logging.getLogger("credstore.cli")

_PASSWORD_ATTEMPTS = 3


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage stored user credentials")
    parser.add_argument(
        "--db",
        dest="db_location",
        default=None,
        help="Database location (defaults to CREDSTORE_DB or the configured location)",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to a YAML configuration file (defaults to CREDSTORE_CONFIG)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the users table")

    add_parser = subparsers.add_parser("add", help="Store a new user")
    add_parser.add_argument("email", help="Unique email address for the user")

    get_parser = subparsers.add_parser("get", help="Show a stored user")
    get_parser.add_argument("email")
    get_parser.add_argument(
        "--show-password",
        action="store_true",
        help="Also print the stored password or password hash",
    )

    update_parser = subparsers.add_parser("update", help="Change a user's password or email")
    update_parser.add_argument("email", help="Current email address of the user")
    update_parser.add_argument("--rename", default=None, help="New email address for the user")

    delete_parser = subparsers.add_parser("delete", help="Remove a user")
    delete_parser.add_argument("email")

    subparsers.add_parser("list", help="List stored email addresses")

    return parser.parse_args(list(argv) if argv is not None else sys.argv[1:])


def _load_config(config_path: str | None) -> StoreConfig:
    path = resolve_config_path(config_path or os.getenv("CREDSTORE_CONFIG"))
    if path is None:
        return StoreConfig()
    return load_store_config(path)


def prompt_for_password() -> str:
    for _ in range(_PASSWORD_ATTEMPTS):
        password = getpass("Password: ")
        confirm = getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if not password:
            print("Password must not be empty.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def _run(store: CredentialStore, args: argparse.Namespace) -> int:
    if args.command == "init-db":
        print("Database initialisation complete.")
    elif args.command == "add":
        email = args.email.strip()
        store.add(User(email=email, password=prompt_for_password()))
        print(f"Added user {email}")
    elif args.command == "get":
        user = store.get(args.email.strip())
        if args.show_password:
            print(f"{user.email}\t{user.password}")
        else:
            print(user.email)
    elif args.command == "update":
        current = args.email.strip()
        new_email = args.rename.strip() if args.rename else current
        store.update(User(email=new_email, password=prompt_for_password()), current_email=current)
        print(f"Updated user {new_email}")
    elif args.command == "delete":
        email = args.email.strip()
        if store.delete(email):
            print(f"Deleted user {email}")
        else:
            print(f"No user {email}; nothing to delete")
    elif args.command == "list":
        for email in store.emails():
            print(email)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        config = _load_config(args.config_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    location = resolve_database_location(args.db_location or os.getenv("CREDSTORE_DB"), config)
    try:
        with CredentialStore.connect(location, config=config) as store:
            return _run(store, args)
    except StoreError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

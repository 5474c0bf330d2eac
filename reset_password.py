#!/usr/bin/env python3
"""
Reset a user's password in the Meals Finder SQLite database.

This script never reads or reveals existing passwords.  It stores a
fresh PBKDF2 hash for the given username through the same query layer
the API uses.

Usage:
    python reset_password.py --db ./meals_finder.db --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from meals_finder_api.app.core.security import hash_password
from meals_finder_api.app.repositories.user_queries import UserQueries
from meals_finder_api.app.schemas.user import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a Meals Finder user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to the SQLite DB file (e.g., ./meals_finder.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not PASSWORD_MIN_LENGTH <= len(new_password) <= PASSWORD_MAX_LENGTH:
        print(
            f"[!] Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters long.",
            file=sys.stderr,
        )
        sys.exit(1)

    queries = UserQueries(os.path.abspath(args.db))
    try:
        updated = queries.update_password(args.username, hash_password(new_password))
    except sqlite3.Error as e:
        print(f"[!] Database error: {e}", file=sys.stderr)
        sys.exit(3)
    if not updated:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for user: {args.username}")


if __name__ == "__main__":
    main()

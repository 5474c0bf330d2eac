#!/usr/bin/env python3
"""
Issue a long-lived session token for a user.

The token is signed with ``SECRET_KEY`` from the environment (or the
``.env`` file), exactly like tokens returned by ``POST /users/login``.
Handy for service accounts and manual API testing.

Usage:
    python create_token.py --username alice --days 365
"""

import argparse

from meals_finder_api.app.core.config import settings
from meals_finder_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a Meals Finder session token.")
    ap.add_argument("--username", required=True, help="Token subject")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()

    token = create_access_token(
        args.username,
        settings.secret_key,
        expires_delta=args.days * 24 * 60 * 60,
        algorithm=settings.algorithm,
    )
    print(token)


if __name__ == "__main__":
    main()

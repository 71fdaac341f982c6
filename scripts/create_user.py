#!/usr/bin/env python3
"""
Create a user in the SQLite DB.

Usage:
  python3 scripts/create_user.py --name Alice --email alice@example.com --password '...'

Intended for local/dev seeding.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from projects_api.config import Settings
from projects_api.persistence import connection, init_db
from projects_api.services import AccountService, DuplicateEmailError, MissingFieldsError


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a user account")
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--db", help="SQLite path (default: DATABASE_PATH or data/app.db)")
    args = ap.parse_args()

    settings = Settings.from_env()
    db_path = Path(args.db) if args.db else settings.database_path
    init_db(db_path)

    svc = AccountService(settings.jwt_secret)
    with connection(db_path) as conn:
        try:
            user = svc.register(conn, args.name, args.email, args.password)
        except (MissingFieldsError, DuplicateEmailError) as e:
            raise SystemExit(f"error: {e}")

    print("Created user:")
    print(user.to_dict())


if __name__ == "__main__":
    main()

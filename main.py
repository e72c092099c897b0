#!/usr/bin/env python3
"""
Job board -- command-line entry point.

Usage:
  python main.py serve
  python main.py serve --port 8000 --reload
  python main.py create-admin --name "Site Admin" --email admin@example.com --password 's3cret!'

Environment variables (see core/config.py for the full list):
  SECRET_KEY     JWT signing key. The compiled-in default is insecure.
  DATABASE_URL   SQLAlchemy URL. Defaults to a SQLite file beside the code.
  PORT           Listen port for `serve`. Defaults to 10000.

create-admin is the only way to obtain a stored admin account: /register
always creates regular users, and the superuser pair from the environment is
never written to the database.
"""

import argparse
import sys

from core.config import get_settings
from core.errors import EmailTaken


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _create_admin(args: argparse.Namespace) -> int:
    from auth.models import User
    from auth.passwords import hash_password
    from auth.store import UserStore

    if not (args.name and args.email and args.password):
        print("  [!] --name, --email and --password must all be non-empty.")
        return 2

    store = UserStore(args.database_url)
    try:
        user_id = store.insert(
            User(name=args.name, email=args.email, password_hash=hash_password(args.password), is_admin=True)
        )
    except EmailTaken:
        print(f"  [!] A user with email '{args.email}' already exists.")
        return 1
    finally:
        store.close()
    print(f"  Created admin user id={user_id} ({args.email})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Job board API server and admin tools.")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API under uvicorn.")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Listen port (default: PORT or 10000)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development only)")
    serve.set_defaults(func=_serve)

    admin = sub.add_parser("create-admin", help="Insert a stored admin account.")
    admin.add_argument("--name", required=True)
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--database-url", default=None, help="Override DATABASE_URL for this command")
    admin.set_defaults(func=_create_admin)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

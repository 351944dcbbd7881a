#!/usr/bin/env python3
"""
Auction backend -- command line entry point.

Usage:
  python main.py serve
  python main.py serve --port 8080
  python main.py serve --host 0.0.0.0 --reload
  python main.py init-db

Environment variables (or .env):
  SECRET_KEY    Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL  SQLAlchemy URL. Defaults to a SQLite file next to the code.
  HOST / PORT   Default bind address for `serve` (127.0.0.1:5001).
"""

import argparse
import sys

import uvicorn

from core.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _init_db(args: argparse.Namespace) -> int:
    # Store constructors create their tables if missing.
    from auction.store import ItemStore
    from auth.store import UserStore

    url = get_settings().database_url
    for store in (UserStore(url), ItemStore(url)):
        store.close()
    print(f"  Database ready: {url}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="auction",
        description="Online auction backend: registration, login, item listing and bidding.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting, 5001)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    serve.set_defaults(func=_serve)

    init_db = sub.add_parser("init-db", help="Create the database tables and exit")
    init_db.set_defaults(func=_init_db)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""Command line entry point: start the ephemeral store and serve the REST API.

Usage:
  - insta-mongo
  - insta-mongo --rest-port=3200 --db-port=3210
  - insta-mongo --db=mydb --load=fixture-1
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import Optional, Sequence

import uvicorn

from insta_mongo.app import create_app, format_rest_api_help
from insta_mongo.config import DEFAULT_REST_PORT, Settings
from insta_mongo.dependencies.ephemeral_store import EphemeralStore
from insta_mongo.errors import InstaMongoError

logger = logging.getLogger("insta_mongo.cli")

FIXTURES_LAYOUT = """
Database fixtures:

 Place your database fixtures under ./fixtures like this:

 ./fixtures
 \t/fixture-1
 \t\tcollection1.json
 \t\tcollection2.json
 \t/fixture-2
 \t\tanother-collection.json

 Each JSON file is loaded into its own collection.

Rest API:"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="insta-mongo",
        description="Start an instant in-memory MongoDB database and a REST API to load fixtures into it.",
        epilog=FIXTURES_LAYOUT + format_rest_api_help(DEFAULT_REST_PORT),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-?", action="help", help=argparse.SUPPRESS)
    parser.add_argument(
        "--db-port",
        type=int,
        default=None,
        help="Port for the database server (defaults to 5001)",
    )
    parser.add_argument(
        "--rest-port",
        type=int,
        default=None,
        help="Port for the REST API (defaults to 5000)",
    )
    parser.add_argument("--host", default=None, help="Interface the REST API binds to (defaults to 0.0.0.0)")
    parser.add_argument(
        "--fixtures",
        default=None,
        help="Path that contains database fixtures (defaults to ./fixtures)",
    )
    parser.add_argument("--db", default=None, help="Database into which to load the initial fixture")
    parser.add_argument("--load", default=None, help="Name of an initial fixture to load at startup")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_env().with_overrides(
        db_port=args.db_port,
        rest_port=args.rest_port,
        rest_host=args.host,
        fixtures_root=args.fixtures,
        initial_db=args.db,
        initial_fixture=args.load,
    )


def _fail(exc: BaseException) -> int:
    print("insta-mongo failed to start:", file=sys.stderr)
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None, store_factory=EphemeralStore) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
        settings.validate()
    except InstaMongoError as exc:
        return _fail(exc)

    store = store_factory(settings.db_port)
    try:
        try:
            store_uri = store.start()
        except Exception as exc:
            return _fail(exc)

        settings = settings.with_store_uri(store_uri)
        logger.info("[cli] Loading database fixtures from %s", settings.fixtures_root)
        # uvicorn exits non-zero itself when the port cannot be bound or app
        # startup (including the initial fixture load) fails.
        uvicorn.run(
            create_app(settings),
            host=settings.rest_host,
            port=settings.rest_port,
            lifespan="on",
        )
        return 0
    finally:
        store.stop()


if __name__ == "__main__":
    sys.exit(main())

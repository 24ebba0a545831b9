"""Command-line entry point: run one statement and print the result as JSON.

Usage:
    python -m dualsql --engine sq3 --database app.db "select * from t where id = $1" 7
    python -m dualsql --engine pg --database app --host db.internal \\
        --user app --ca-certificate-file ca.pem --execute "delete from t where id = $1" 7

The Postgres password is read from DUALSQL_PASSWORD. Parameters are parsed
as JSON when possible (``7`` → int, ``null`` → None) and passed as strings
otherwise.
"""

import argparse
import asyncio
import json
import logging
import sqlite3
import sys
from typing import Any

import asyncpg

from dualsql.config import get_log_level, get_password
from dualsql.db.connection import create_pool, lease
from dualsql.errors import DualSqlError
from dualsql.models.options import Engine, PoolOptions
from dualsql.models.result import QueryResult

logger = logging.getLogger(__name__)


def _parse_param(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dualsql", description="Run a SQL statement")
    parser.add_argument("--engine", required=True, choices=[e.value for e in Engine])
    parser.add_argument("--database", required=True, help="Database name, or SQLite file path")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--user", default=None)
    parser.add_argument("--ca-certificate-file", default=None)
    parser.add_argument(
        "--readonly", action="store_true", default=None, help="Open SQLite read-only"
    )
    parser.add_argument(
        "--execute", action="store_true", help="Run as a command and report rows affected"
    )
    parser.add_argument("sql", help="Statement with $1, $2, ... placeholders")
    parser.add_argument("params", nargs="*", help="Positional parameter values")
    return parser


async def run(args: argparse.Namespace) -> QueryResult:
    """Open a pool from ``args``, run the statement once and end the pool."""
    options = PoolOptions(
        engine=args.engine,
        database=args.database,
        readonly=args.readonly,
        host=args.host,
        user=args.user,
        port=args.port,
        ca_certificate_file=args.ca_certificate_file,
    )
    params = [_parse_param(p) for p in args.params]
    pool = create_pool(options)
    try:
        await pool.init(password=get_password())
        async with lease(pool) as conn:
            if args.execute:
                return await conn.execute(args.sql, params)
            return await conn.query(args.sql, params)
    finally:
        await pool.end()


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    logging.basicConfig(
        level=getattr(logging, get_log_level()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    args = _build_parser().parse_args(argv)
    try:
        result = asyncio.run(run(args))
    except (DualSqlError, asyncpg.PostgresError, sqlite3.Error) as exc:
        logger.debug("Statement failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

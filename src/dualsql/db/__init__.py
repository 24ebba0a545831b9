"""Database pools, connections and helpers."""

from dualsql.db.backend import ConnectionPool, PoolState, SqlConnection
from dualsql.db.commands import insert, insert_or_replace, insert_row, query_row
from dualsql.db.connection import create_pool, lease
from dualsql.db.postgres_backend import PostgresConnection, PostgresPool
from dualsql.db.schema import get_app_schema_version, set_app_schema_version
from dualsql.db.sqlite_backend import SQLiteConnection, SQLitePool

__all__ = [
    "ConnectionPool",
    "PoolState",
    "PostgresConnection",
    "PostgresPool",
    "SQLiteConnection",
    "SQLitePool",
    "SqlConnection",
    "create_pool",
    "get_app_schema_version",
    "insert",
    "insert_or_replace",
    "insert_row",
    "lease",
    "query_row",
    "set_app_schema_version",
]

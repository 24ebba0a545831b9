"""Async PostgreSQL/SQLite access layer with a shared pool surface and upsert builder."""

from dualsql.builders.inserts import build_insert
from dualsql.db import (
    ConnectionPool,
    PoolState,
    SqlConnection,
    create_pool,
    get_app_schema_version,
    insert,
    insert_or_replace,
    insert_row,
    lease,
    query_row,
    set_app_schema_version,
)
from dualsql.errors import (
    ConfigurationError,
    ConnectionReleasedError,
    ConnectivityError,
    DualSqlError,
    InvalidInputError,
    PoolStateError,
)
from dualsql.models.options import Engine, PoolOptions
from dualsql.models.result import QueryResult, Row
from dualsql.models.statement import OnConflictUpdate, Statement

__all__ = [
    "ConfigurationError",
    "ConnectionPool",
    "ConnectionReleasedError",
    "ConnectivityError",
    "DualSqlError",
    "Engine",
    "InvalidInputError",
    "OnConflictUpdate",
    "PoolOptions",
    "PoolState",
    "PoolStateError",
    "QueryResult",
    "Row",
    "SqlConnection",
    "Statement",
    "build_insert",
    "create_pool",
    "get_app_schema_version",
    "insert",
    "insert_or_replace",
    "insert_row",
    "lease",
    "query_row",
    "set_app_schema_version",
]

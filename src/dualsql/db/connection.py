"""Pool creation and connection leasing."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dualsql.db.backend import ConnectionPool, SqlConnection
from dualsql.db.postgres_backend import PostgresPool
from dualsql.db.sqlite_backend import SQLitePool
from dualsql.errors import ConfigurationError
from dualsql.models.options import Engine, PoolOptions


def create_pool(options: PoolOptions, *, logger: logging.Logger | None = None) -> ConnectionPool:
    """Create an uninitialized pool for the engine named in ``options``.

    ``logger`` is handed to the pool and every connection it leases; it
    defaults to the adapter module's logger.
    """
    if options.engine == Engine.POSTGRES:
        return PostgresPool(options, logger=logger)
    if options.engine == Engine.SQLITE:
        return SQLitePool(options, logger=logger)
    raise ConfigurationError(f"Unsupported database engine: {options.engine!r}")


@asynccontextmanager
async def lease(pool: ConnectionPool) -> AsyncIterator[SqlConnection]:
    """Lease a connection and release it on every exit path."""
    conn = await pool.get_connection()
    try:
        yield conn
    finally:
        await conn.release()

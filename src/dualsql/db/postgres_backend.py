"""PostgreSQL implementation of the pool and connection protocols.

Uses asyncpg's native pool. Statements already use ``$N`` placeholders, so
nothing is rewritten; the work here is TLS setup at pool init and turning
asyncpg records and status tags into a ``QueryResult``.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from pathlib import Path
from typing import TYPE_CHECKING, Any

import asyncpg

from dualsql.config import (
    get_cert_dir,
    get_pg_connect_timeout,
    get_pg_idle_timeout,
    get_pg_pool_max,
    get_pg_pool_min,
)
from dualsql.db.backend import PoolState
from dualsql.errors import (
    ConfigurationError,
    ConnectionReleasedError,
    ConnectivityError,
    PoolStateError,
)
from dualsql.models.options import Engine, PoolOptions
from dualsql.models.result import QueryResult

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_CONNECT_ERRORS = (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError)


def _resolve_logger(injected: logging.Logger | None) -> logging.Logger:
    return injected if injected is not None else logger


def _parse_rowcount(status: str | None) -> int | None:
    """Parse the row count from an asyncpg status tag.

    Examples: "INSERT 0 1" → 1, "UPDATE 3" → 3, "SELECT 0" → 0,
    "CREATE TABLE" → None.
    """
    if not status:
        return None
    parts = status.split()
    if len(parts) >= 2:
        try:
            return int(parts[-1])
        except ValueError:
            pass
    return None


def _resolve_certificate(name: str) -> Path:
    path = Path(name).expanduser()
    if path.is_absolute():
        return path
    return get_cert_dir() / path


def _load_ca_text(options: PoolOptions) -> str:
    """Read the CA certificate named in the options. Raises ConfigurationError."""
    if not options.ca_certificate_file:
        raise ConfigurationError("missing ca_certificate_file")
    path = _resolve_certificate(options.ca_certificate_file)
    try:
        return path.read_text()
    except OSError as exc:
        raise ConfigurationError(f"error reading ca_certificate_file from {path}: {exc}") from exc


def _ssl_context(ca_text: str, *, reject_unauthorized: bool) -> ssl.SSLContext:
    """Build the client TLS context, trusting ``ca_text``.

    With ``reject_unauthorized=False`` the server certificate is not verified.
    """
    try:
        ctx = ssl.create_default_context(cadata=ca_text)
    except (ssl.SSLError, ValueError) as exc:
        raise ConnectivityError(f"cannot load CA certificate: {exc}") from exc
    if not reject_unauthorized:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


class PostgresConnection:
    """Wraps a pooled asyncpg.Connection to satisfy the SqlConnection protocol."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        conn: asyncpg.Connection,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize with the owning pool and the leased connection."""
        self._pool = pool
        self._conn = conn
        self._released = False
        self.logger = _resolve_logger(logger)

    @property
    def engine(self) -> Engine:
        """Always ``Engine.POSTGRES``."""
        return Engine.POSTGRES

    @property
    def released(self) -> bool:
        """True once the connection went back to the pool."""
        return self._released

    async def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a statement; ``row_count`` comes from the command status tag."""
        if self._released:
            raise ConnectionReleasedError("Postgres connection has been released")
        stmt = await self._conn.prepare(sql)
        records = await stmt.fetch(*params)
        return QueryResult(
            command=sql,
            row_count=_parse_rowcount(stmt.get_statusmsg()),
            rows=[dict(r) for r in records],
            fields=[attr.name for attr in stmt.get_attributes()],
        )

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a command. Postgres reports affected rows natively."""
        return await self.query(sql, params)

    async def release(self) -> None:
        """Return the connection to the pool for reuse."""
        if self._released:
            return
        self._released = True
        await self._pool.release(self._conn)

    async def __aenter__(self) -> PostgresConnection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.release()


class PostgresPool:
    """asyncpg pool configured from PoolOptions.

    Size bounds and timeouts come from ``dualsql.config``; they apply to the
    whole pool, not per call.
    """

    def __init__(self, options: PoolOptions, *, logger: logging.Logger | None = None) -> None:
        """Initialize with pool options. No connection is made until init()."""
        self.options = options
        self._logger = _resolve_logger(logger)
        self._pool: asyncpg.Pool | None = None
        self._state = PoolState.UNINITIALIZED

    @property
    def engine(self) -> Engine:
        """Always ``Engine.POSTGRES``."""
        return Engine.POSTGRES

    @property
    def state(self) -> PoolState:
        """Current lifecycle state."""
        return self._state

    async def init(self, user: str | None = None, password: str | None = None) -> None:
        """Validate configuration, load the CA certificate and open the pool.

        Configuration problems raise ConfigurationError before any network
        attempt. asyncpg opens ``min_size`` connections while creating the
        pool, so unreachable hosts and bad credentials raise
        ConnectivityError here rather than on first use.
        """
        if self._state is not PoolState.UNINITIALIZED:
            raise PoolStateError(f"cannot init a pool that is {self._state}")
        if self.options.readonly is not None:
            raise ConfigurationError("readonly is not supported for Postgres")

        ca_text = _load_ca_text(self.options)
        ctx = _ssl_context(ca_text, reject_unauthorized=self.options.reject_unauthorized)

        host = self.options.host
        try:
            self._pool = await asyncpg.create_pool(
                host=host,
                port=self.options.port,
                user=user or self.options.user,
                password=password,
                database=self.options.database,
                ssl=ctx,
                min_size=get_pg_pool_min(),
                max_size=get_pg_pool_max(),
                max_inactive_connection_lifetime=get_pg_idle_timeout(),
                timeout=get_pg_connect_timeout(),
            )
        except _CONNECT_ERRORS as exc:
            raise ConnectivityError(
                f"cannot connect to Postgres database {self.options.database} at {host}: {exc}"
            ) from exc
        self._state = PoolState.INITIALIZED
        self._logger.info("Postgres pool ready for %s at %s", self.options.database, host)

    async def get_connection(self) -> PostgresConnection:
        """Lease a connection, waiting at most the configured connect timeout."""
        if self._state is not PoolState.INITIALIZED or self._pool is None:
            raise PoolStateError(f"cannot get a connection from a pool that is {self._state}")
        try:
            conn = await self._pool.acquire(timeout=get_pg_connect_timeout())
        except _CONNECT_ERRORS as exc:
            raise ConnectivityError(f"cannot lease a Postgres connection: {exc}") from exc
        return PostgresConnection(self._pool, conn, logger=self._logger)

    async def end(self) -> None:
        """Close the native pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
        self._state = PoolState.ENDED

"""SQLite implementation of the pool and connection protocols.

There is no real pooling: every ``get_connection()`` opens a fresh
aiosqlite handle and ``release()`` closes it. Statements written with
``$N`` placeholders are rewritten to ``?`` before they reach SQLite.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiosqlite

from dualsql.db.backend import PoolState
from dualsql.errors import ConnectionReleasedError, ConnectivityError, PoolStateError
from dualsql.models.options import Engine, PoolOptions
from dualsql.models.result import QueryResult

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Pre-compiled regex for placeholder translation
_PLACEHOLDER_RE = re.compile(r"\$\d+")

_CHANGES_SQL = "select changes() as changes"


def _translate_placeholders(sql: str) -> str:
    """Convert ``$1, $2, ...`` placeholders to ``?`` for SQLite.

    Values are bound positionally, so placeholders must appear in ascending
    order. A ``$N`` inside a string literal is rewritten too.
    """
    return _PLACEHOLDER_RE.sub("?", sql)


def _open_uri(database: str, readonly: bool) -> str:
    """Build the ``file:`` URI for ``database``.

    The path is percent-encoded so that ``#``, ``?`` and ``%`` in a file name
    stay part of the path and the ``mode`` query reaches SQLite.
    """
    mode = "ro" if readonly else "rwc"
    return f"file:{quote(database)}?mode={mode}"


def _resolve_logger(injected: logging.Logger | None) -> logging.Logger:
    return injected if injected is not None else logger


class SQLiteConnection:
    """Wraps one aiosqlite.Connection to satisfy the SqlConnection protocol."""

    def __init__(self, conn: aiosqlite.Connection, *, logger: logging.Logger | None = None) -> None:
        """Initialize with an open aiosqlite connection."""
        self._conn = conn
        self._released = False
        self.logger = _resolve_logger(logger)

    @property
    def engine(self) -> Engine:
        """Always ``Engine.SQLITE``."""
        return Engine.SQLITE

    @property
    def released(self) -> bool:
        """True once the underlying file handle has been closed."""
        return self._released

    def _check_open(self) -> None:
        if self._released:
            raise ConnectionReleasedError("SQLite connection has been released")

    async def _fetch(
        self, sql: str, params: Sequence[Any]
    ) -> tuple[list[dict[str, Any]], list[str]]:
        cursor = await self._conn.execute(sql, tuple(params))
        try:
            rows = await cursor.fetchall()
            fields = [col[0] for col in cursor.description or ()]
        finally:
            await cursor.close()
        return [dict(row) for row in rows], fields

    async def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a statement and return its rows; ``row_count`` is the number of rows."""
        self._check_open()
        rows, fields = await self._fetch(_translate_placeholders(sql), params)
        return QueryResult(command=sql, row_count=len(rows), rows=rows, fields=fields)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a command and report rows affected.

        SQLite does not report affected rows with the result set, so when the
        statement returned nothing the count is read back with ``changes()``
        on the same handle. ``changes()`` only tracks INSERT/UPDATE/DELETE;
        after DDL it still reports the last DML statement's count.
        """
        result = await self.query(sql, params)
        if result.row_count == 0:
            changes, _ = await self._fetch(_CHANGES_SQL, ())
            result.row_count = changes[0]["changes"]
        return result

    async def release(self) -> None:
        """Close the database handle. A released connection cannot be reused."""
        if self._released:
            return
        self._released = True
        await self._conn.close()

    async def __aenter__(self) -> SQLiteConnection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.release()


class SQLitePool:
    """Pool facade over SQLite so callers see the same lifecycle as Postgres.

    ``init()`` ignores credentials and ``end()`` only changes state; there
    are no native pooled handles to close.
    """

    def __init__(self, options: PoolOptions, *, logger: logging.Logger | None = None) -> None:
        """Initialize with pool options; nothing is opened until get_connection()."""
        self.options = options
        self._logger = _resolve_logger(logger)
        self._state = PoolState.UNINITIALIZED

    @property
    def engine(self) -> Engine:
        """Always ``Engine.SQLITE``."""
        return Engine.SQLITE

    @property
    def state(self) -> PoolState:
        """Current lifecycle state."""
        return self._state

    async def init(self, user: str | None = None, password: str | None = None) -> None:
        """Mark the pool usable. SQLite has no credentials."""
        if self._state is not PoolState.UNINITIALIZED:
            raise PoolStateError(f"cannot init a pool that is {self._state}")
        if user or password:
            self._logger.debug("SQLite ignores user/password for %s", self.options.database)
        self._state = PoolState.INITIALIZED

    async def get_connection(self) -> SQLiteConnection:
        """Open a fresh handle on the database file."""
        if self._state is not PoolState.INITIALIZED:
            raise PoolStateError(f"cannot get a connection from a pool that is {self._state}")

        database = self.options.database
        readonly = bool(self.options.readonly)
        try:
            if database == ":memory:":
                conn = await aiosqlite.connect(":memory:", isolation_level=None)
            else:
                conn = await aiosqlite.connect(
                    _open_uri(database, readonly), uri=True, isolation_level=None
                )
        except sqlite3.Error as exc:
            raise ConnectivityError(f"cannot open SQLite database {database}: {exc}") from exc
        conn.row_factory = aiosqlite.Row
        self._logger.debug("Opened SQLite database %s (readonly=%s)", database, readonly)
        return SQLiteConnection(conn, logger=self._logger)

    async def end(self) -> None:
        """Mark the pool ended. Open connections close on their own release()."""
        self._state = PoolState.ENDED

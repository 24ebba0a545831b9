"""Connection and pool protocols: the surface callers program against.

Each engine (Postgres, SQLite) provides a concrete pool and connection.
Placeholder syntax and result-shape differences are handled inside the
adapter; callers write ``$N`` placeholders and always get a ``QueryResult``.
Behavior that differs by engine is routed on the ``engine`` tag.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dualsql.models.options import Engine, PoolOptions
    from dualsql.models.result import QueryResult


class PoolState(StrEnum):
    """Pool lifecycle: uninitialized → initialized → ended."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    ENDED = "ended"


@runtime_checkable
class SqlConnection(Protocol):
    """A connection leased from a pool. Owned by one caller at a time.

    A single connection must not run two operations concurrently; no locking
    is done on the caller's behalf.
    """

    logger: logging.Logger

    @property
    def engine(self) -> Engine:
        """Engine tag of this connection."""
        ...

    @property
    def released(self) -> bool:
        """True once the connection has been handed back to its pool."""
        ...

    async def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a statement and return its rows."""
        ...

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run a command and report the number of rows it affected."""
        ...

    async def release(self) -> None:
        """Hand the connection back. Calling it again is a no-op."""
        ...

    async def __aenter__(self) -> SqlConnection: ...

    async def __aexit__(self, *exc_info: object) -> None: ...


@runtime_checkable
class ConnectionPool(Protocol):
    """Lifecycle owner of the native connections for one database target."""

    options: PoolOptions

    @property
    def engine(self) -> Engine:
        """Engine tag of this pool."""
        ...

    @property
    def state(self) -> PoolState:
        """Current lifecycle state."""
        ...

    async def init(self, user: str | None = None, password: str | None = None) -> None:
        """Validate configuration and prepare the pool. Fails fast on bad config."""
        ...

    async def get_connection(self) -> SqlConnection:
        """Lease a connection. Only valid while the pool is initialized."""
        ...

    async def end(self) -> None:
        """Shut the pool down. Idempotent."""
        ...

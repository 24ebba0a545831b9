"""Exception hierarchy.

Statement errors are not represented here: failures reported by the engines
themselves (``asyncpg.PostgresError``, ``sqlite3.Error``) reach the caller
unchanged.
"""


class DualSqlError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(DualSqlError, ValueError):
    """A pool or statement was configured with missing or conflicting settings."""


class InvalidInputError(DualSqlError, ValueError):
    """Rows handed to the statement builder cannot form a statement."""


class ConnectivityError(DualSqlError, ConnectionError):
    """A pool could not open or lease a connection."""


class PoolStateError(DualSqlError, RuntimeError):
    """A pool or connection was used outside its valid lifecycle state."""


class ConnectionReleasedError(PoolStateError):
    """A connection was used after it was released."""

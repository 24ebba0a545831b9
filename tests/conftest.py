"""Shared test fixtures."""

import pytest
import pytest_asyncio

from dualsql.db.sqlite_backend import SQLitePool
from dualsql.models.options import Engine, PoolOptions


@pytest.fixture
def sqlite_options(tmp_path):
    """Options for a fresh SQLite database file."""
    return PoolOptions(engine=Engine.SQLITE, database=str(tmp_path / "test.db"))


@pytest_asyncio.fixture
async def sqlite_pool(sqlite_options):
    """Initialized SQLite pool over a temp file."""
    pool = SQLitePool(sqlite_options)
    await pool.init()
    yield pool
    await pool.end()


@pytest_asyncio.fixture
async def conn(sqlite_pool):
    """Leased SQLite connection with a small ``items`` table."""
    connection = await sqlite_pool.get_connection()
    await connection.execute(
        "CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT, ts INTEGER DEFAULT 0)"
    )
    yield connection
    await connection.release()


class FakeAttribute:
    """Stand-in for asyncpg.types.Attribute."""

    def __init__(self, name: str):
        self.name = name


class FakeRecord:
    """Minimal asyncpg.Record stand-in supporting dict()."""

    def __init__(self, data: dict):
        self._data = data

    def __getitem__(self, key):
        if isinstance(key, int):
            return list(self._data.values())[key]
        return self._data[key]

    def keys(self):
        return list(self._data.keys())


class FakePreparedStatement:
    """Stand-in for asyncpg.PreparedStatement."""

    def __init__(self, records: list[dict], status: str | None, fields: list[str]):
        self._records = records
        self._status = status
        self._fields = fields
        self.fetch_args: tuple | None = None

    async def fetch(self, *args):
        self.fetch_args = args
        return [FakeRecord(r) for r in self._records]

    def get_statusmsg(self):
        return self._status

    def get_attributes(self):
        return tuple(FakeAttribute(f) for f in self._fields)


class FakePgConnection:
    """Stand-in for a pooled asyncpg.Connection returning one canned statement."""

    def __init__(self, records=None, status=None, fields=None, error: Exception | None = None):
        self.statement = FakePreparedStatement(records or [], status, fields or [])
        self.error = error
        self.prepared: list[str] = []

    async def prepare(self, sql: str):
        self.prepared.append(sql)
        if self.error is not None:
            raise self.error
        return self.statement


class FakePgPool:
    """Stand-in for asyncpg.Pool."""

    def __init__(self, connection: FakePgConnection | None = None):
        self.connection = connection or FakePgConnection()
        self.released: list = []
        self.closed = False
        self.acquire_timeout = None

    async def acquire(self, *, timeout=None):
        self.acquire_timeout = timeout
        return self.connection

    async def release(self, conn):
        self.released.append(conn)

    async def close(self):
        self.closed = True

"""Per-application schema version bookkeeping.

Applications call ``get_app_schema_version()`` at startup, run the upgrades
needed to move from that version to the current one, and record each step
with ``set_app_schema_version()``::

    version = await get_app_schema_version(conn, "billing")
    if version == 0:
        await conn.execute(CREATE_TABLE_INVOICES)
        version = 1
        await set_app_schema_version(conn, "billing", version)
    if version == 1:
        await conn.execute("ALTER TABLE invoices ADD COLUMN paid_at TEXT")
        version = 2
        await set_app_schema_version(conn, "billing", version)
"""

import logging
from datetime import UTC, datetime

from dualsql.db.backend import SqlConnection

logger = logging.getLogger(__name__)

CREATE_TABLE_APP_DB_VERSION = """
CREATE TABLE IF NOT EXISTS app_db_version (
    app_code TEXT,
    version INTEGER,
    date_updated TEXT,
    PRIMARY KEY (app_code)
)"""


def _today() -> str:
    return datetime.now(UTC).date().isoformat()


async def get_app_schema_version(conn: SqlConnection, app_code: str) -> int:
    """Return the recorded schema version for ``app_code``.

    Creates the version table if needed and registers the application at
    version 0 the first time it is seen.
    """
    await conn.execute(CREATE_TABLE_APP_DB_VERSION)
    result = await conn.query(
        "select max(version) as version from app_db_version where app_code=$1", [app_code]
    )
    version = result.rows[0]["version"]
    if version is None:
        version = 0
        await conn.execute(
            "insert into app_db_version (app_code,version,date_updated) values ($1,$2,$3)",
            [app_code, version, _today()],
        )
    logger.info("Schema version for %s: %d", app_code, version)
    return version


async def set_app_schema_version(conn: SqlConnection, app_code: str, version: int) -> None:
    """Record ``version`` as the current schema version for ``app_code``."""
    await conn.execute(
        "update app_db_version set version=$1, date_updated=$2 where app_code=$3",
        [version, _today(), app_code],
    )
    logger.info("Schema version for %s set to %d", app_code, version)

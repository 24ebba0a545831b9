"""Convenience operations bound to a live connection."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from dualsql.builders.inserts import InsertCommand, build_insert
from dualsql.db.backend import SqlConnection
from dualsql.models.result import QueryResult, Row
from dualsql.models.statement import OnConflictUpdate


async def insert(
    conn: SqlConnection,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    on_conflict: OnConflictUpdate | None = None,
    *,
    insert_cmd: InsertCommand = "insert",
) -> QueryResult:
    """Insert ``rows`` into ``table`` in one statement.

    On failure the statement text and its values are logged on
    ``conn.logger`` and the original exception is re-raised. Retrying or
    rolling back is left to the caller.

    Example upsert that only overwrites older rows::

        await insert(
            conn,
            "prices",
            rows,
            OnConflictUpdate(conflict_fields="id", condition="WHERE prices.ts < EXCLUDED.ts"),
        )
    """
    sql, values = build_insert(conn.engine, table, rows, on_conflict, insert_cmd=insert_cmd)
    try:
        result = await conn.execute(sql, values)
    except Exception:
        conn.logger.error(
            "Insert into %s failed\nstatement: %s\nvalues: %r", table, sql, values, exc_info=True
        )
        raise
    conn.logger.debug("Inserted %s rows into %s", result.row_count, table)
    return result


async def insert_row(
    conn: SqlConnection,
    table: str,
    row: Mapping[str, Any],
    on_conflict: OnConflictUpdate | None = None,
) -> QueryResult:
    """Insert a single row."""
    return await insert(conn, table, [row], on_conflict)


async def insert_or_replace(
    conn: SqlConnection,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    id_fields: str | list[str],
) -> QueryResult:
    """Upsert ``rows`` keyed on ``id_fields``, overwriting every column on conflict."""
    return await insert(conn, table, rows, OnConflictUpdate(conflict_fields=id_fields))


async def query_row(conn: SqlConnection, sql: str, params: Sequence[Any] = ()) -> Row | None:
    """Return the first row of a query, or None."""
    result = await conn.query(sql, params)
    return result.rows[0] if result.rows else None

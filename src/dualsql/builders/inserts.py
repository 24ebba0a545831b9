"""Multi-row INSERT / upsert statement builder.

One logical operation ("insert these rows, update on conflict") becomes a
single statement in the dialect of the target engine. Postgres gets numbered
``$N`` placeholders, SQLite a repeated ``?``. Both engines share the
``ON CONFLICT (...) DO UPDATE SET col=EXCLUDED.col`` upsert syntax.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from dualsql.errors import ConfigurationError, InvalidInputError
from dualsql.models.options import Engine
from dualsql.models.statement import OnConflictUpdate, Statement

InsertCommand = Literal["insert", "insert or replace"]

_INSERT_COMMANDS = ("insert", "insert or replace")


def _placeholder(engine: Engine, index: int) -> str:
    """Return the placeholder for the 1-based parameter ``index``."""
    if engine is Engine.POSTGRES:
        return f"${index}"
    return "?"


def _conflict_clause(fields: list[str], on_conflict: OnConflictUpdate) -> str:
    target = on_conflict.target
    if not target:
        raise ConfigurationError("on_conflict requires at least one conflict field")
    # Every column is reassigned, the conflict target included.
    assignments = ",".join(f"{field}=EXCLUDED.{field}" for field in fields)
    clause = f" ON CONFLICT ({target}) DO UPDATE SET {assignments}"
    if on_conflict.condition:
        clause += f" {on_conflict.condition}"
    return clause


def build_insert(
    engine: Engine | str,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    on_conflict: OnConflictUpdate | None = None,
    *,
    insert_cmd: InsertCommand = "insert",
) -> Statement:
    """Build one INSERT statement covering every row.

    The first row fixes the column list and the order values are read in;
    every other row must carry the same set of keys. ``table``, the column
    names and ``on_conflict.condition`` are written into the SQL as given.

    Raises:
        InvalidInputError: ``rows`` is empty or a row's keys differ from row 0.
        ConfigurationError: unknown engine, unknown or misplaced insert
            command, or an upsert without a conflict target.
    """
    try:
        engine = Engine(engine)
    except ValueError:
        raise ConfigurationError(f"Unsupported database engine: {engine!r}") from None

    if insert_cmd not in _INSERT_COMMANDS:
        raise ConfigurationError(f"Unsupported insert command: {insert_cmd!r}")
    if insert_cmd == "insert or replace":
        if engine is not Engine.SQLITE:
            raise ConfigurationError("'insert or replace' is only supported for SQLite")
        if on_conflict is not None:
            raise ConfigurationError("'insert or replace' cannot be combined with on_conflict")

    if not rows:
        raise InvalidInputError(f"cannot build an insert into {table} from zero rows")

    fields = list(rows[0].keys())
    if not fields:
        raise InvalidInputError(f"cannot build an insert into {table} from a row with no columns")

    conflict = _conflict_clause(fields, on_conflict) if on_conflict is not None else ""

    expected = set(fields)
    values: list[Any] = []
    tuples: list[str] = []
    for i, row in enumerate(rows):
        if i and set(row.keys()) != expected:
            raise InvalidInputError(
                f"row {i} columns {sorted(row.keys())} differ from row 0 columns {fields}"
            )
        placeholders = []
        for field in fields:
            values.append(row[field])
            placeholders.append(_placeholder(engine, len(values)))
        tuples.append(f"({','.join(placeholders)})")

    sql = f"{insert_cmd} into {table} ({','.join(fields)}) values {','.join(tuples)}{conflict}"
    return Statement(sql, tuple(values))

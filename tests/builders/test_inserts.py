"""Tests for the INSERT / upsert statement builder."""

import re

import pytest

from dualsql.builders.inserts import build_insert
from dualsql.errors import ConfigurationError, InvalidInputError
from dualsql.models.options import Engine
from dualsql.models.statement import OnConflictUpdate, Statement

ROWS = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


def _substitute(sql: str, values: tuple) -> str:
    """Inline values into $N placeholders as SQL literals."""

    def _literal(match: re.Match[str]) -> str:
        value = values[int(match.group(1)) - 1]
        return f"'{value}'" if isinstance(value, str) else repr(value)

    return re.sub(r"\$(\d+)", _literal, sql)


class TestPostgresPlaceholders:
    """Numbered $N placeholders for Postgres."""

    def test_two_rows(self):
        sql, values = build_insert(Engine.POSTGRES, "t", ROWS)
        assert sql == "insert into t (id,name) values ($1,$2),($3,$4)"
        assert values == (1, "a", 2, "b")

    def test_engine_tag_as_string(self):
        assert build_insert("pg", "t", ROWS) == build_insert(Engine.POSTGRES, "t", ROWS)

    def test_numbering_continues_past_nine(self):
        rows = [{"a": i, "b": i * 10, "c": str(i)} for i in range(5)]
        sql, values = build_insert(Engine.POSTGRES, "t", rows)
        assert sql.endswith("($10,$11,$12),($13,$14,$15)")
        assert len(values) == 15

    def test_returns_statement(self):
        stmt = build_insert(Engine.POSTGRES, "t", ROWS)
        assert isinstance(stmt, Statement)
        assert stmt.sql.startswith("insert into t")


class TestSQLitePlaceholders:
    """Repeated ? placeholders for SQLite."""

    def test_two_rows(self):
        sql, values = build_insert(Engine.SQLITE, "t", ROWS)
        assert sql == "insert into t (id,name) values (?,?),(?,?)"
        assert values == (1, "a", 2, "b")

    def test_insert_or_replace(self):
        sql, _ = build_insert(Engine.SQLITE, "t", ROWS, insert_cmd="insert or replace")
        assert sql == "insert or replace into t (id,name) values (?,?),(?,?)"


class TestRowOrdering:
    """Row 0 fixes the column order for the whole batch."""

    def test_one_tuple_per_row_in_order(self):
        rows = [{"id": i, "name": f"n{i}", "ts": i * 100} for i in range(7)]
        sql, values = build_insert(Engine.POSTGRES, "t", rows)
        assert sql.count("(") == len(rows) + 1  # column list + one tuple per row
        assert len(values) == len(rows) * 3
        assert values[0::3] == tuple(range(7))

    def test_later_rows_read_in_first_row_order(self):
        rows = [{"id": 1, "name": "a"}, {"name": "b", "id": 2}]
        _, values = build_insert(Engine.POSTGRES, "t", rows)
        assert values == (1, "a", 2, "b")

    def test_substituted_values_match_rows(self):
        rows = [
            {"id": 1, "name": "a", "score": 1.5, "flag": True, "note": None},
            {"id": 2, "name": "b", "score": -2.0, "flag": False, "note": None},
        ]
        sql, values = build_insert(Engine.POSTGRES, "t", rows)
        assert _substitute(sql, values) == (
            "insert into t (id,name,score,flag,note) values "
            "(1,'a',1.5,True,None),(2,'b',-2.0,False,None)"
        )

    def test_blob_values_pass_through(self):
        _, values = build_insert(Engine.SQLITE, "t", [{"id": 1, "data": b"\x00\x01"}])
        assert values == (1, b"\x00\x01")

    def test_idempotent(self):
        conflict = OnConflictUpdate(conflict_fields="id", condition="WHERE t.ts < EXCLUDED.ts")
        first = build_insert(Engine.POSTGRES, "t", ROWS, conflict)
        second = build_insert(Engine.POSTGRES, "t", ROWS, conflict)
        assert first.sql == second.sql
        assert first.values == second.values


class TestOnConflict:
    """ON CONFLICT ... DO UPDATE SET clause."""

    def test_updates_every_field_including_target(self):
        sql, _ = build_insert(Engine.POSTGRES, "t", ROWS, OnConflictUpdate(conflict_fields="id"))
        assert sql.endswith(" ON CONFLICT (id) DO UPDATE SET id=EXCLUDED.id,name=EXCLUDED.name")

    def test_same_clause_for_sqlite(self):
        sql, _ = build_insert(Engine.SQLITE, "t", ROWS, OnConflictUpdate(conflict_fields="id"))
        assert sql == (
            "insert into t (id,name) values (?,?),(?,?)"
            " ON CONFLICT (id) DO UPDATE SET id=EXCLUDED.id,name=EXCLUDED.name"
        )

    def test_condition_appended_verbatim(self):
        conflict = OnConflictUpdate(conflict_fields="id", condition="WHERE t.ts < EXCLUDED.ts")
        sql, _ = build_insert(Engine.POSTGRES, "t", ROWS, conflict)
        assert sql.endswith("name=EXCLUDED.name WHERE t.ts < EXCLUDED.ts")

    def test_composite_target_from_list(self):
        rows = [{"a": 1, "b": 2, "v": 3}]
        conflict = OnConflictUpdate(conflict_fields=["a", "b"])
        sql, _ = build_insert(Engine.POSTGRES, "t", rows, conflict)
        assert " ON CONFLICT (a,b) DO UPDATE SET " in sql

    def test_values_unchanged_by_conflict_clause(self):
        _, plain = build_insert(Engine.POSTGRES, "t", ROWS)
        conflict = OnConflictUpdate(conflict_fields="id")
        _, upsert = build_insert(Engine.POSTGRES, "t", ROWS, conflict)
        assert plain == upsert

    @pytest.mark.parametrize("target", ["", "   ", []])
    def test_missing_target_rejected(self, target):
        with pytest.raises(ConfigurationError, match="conflict field"):
            build_insert(Engine.POSTGRES, "t", ROWS, OnConflictUpdate(conflict_fields=target))


class TestInvalidInput:
    """Inputs that cannot form a statement."""

    def test_empty_rows(self):
        with pytest.raises(InvalidInputError, match="zero rows"):
            build_insert(Engine.POSTGRES, "t", [])

    def test_row_without_columns(self):
        with pytest.raises(InvalidInputError):
            build_insert(Engine.POSTGRES, "t", [{}])

    def test_mismatched_row_columns(self):
        with pytest.raises(InvalidInputError, match="row 1"):
            build_insert(Engine.POSTGRES, "t", [{"id": 1, "name": "a"}, {"id": 2}])

    def test_unknown_engine(self):
        with pytest.raises(ConfigurationError, match="Unsupported database engine"):
            build_insert("mysql", "t", ROWS)

    def test_unknown_insert_command(self):
        with pytest.raises(ConfigurationError, match="insert command"):
            build_insert(Engine.SQLITE, "t", ROWS, insert_cmd="replace")

    def test_insert_or_replace_rejected_for_postgres(self):
        with pytest.raises(ConfigurationError, match="only supported for SQLite"):
            build_insert(Engine.POSTGRES, "t", ROWS, insert_cmd="insert or replace")

    def test_insert_or_replace_with_conflict_rejected(self):
        with pytest.raises(ConfigurationError, match="cannot be combined"):
            build_insert(
                Engine.SQLITE,
                "t",
                ROWS,
                OnConflictUpdate(conflict_fields="id"),
                insert_cmd="insert or replace",
            )

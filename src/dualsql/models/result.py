"""Engine-independent result envelope."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Row = dict[str, Any]


class QueryResult(BaseModel):
    """What every connection returns from ``query()`` and ``execute()``.

    ``command`` echoes the statement text as the caller passed it.
    ``row_count`` is the number of rows returned for queries and the number
    of rows affected for INSERT/UPDATE/DELETE; ``None`` when the engine
    reports no count (DDL on Postgres).
    """

    model_config = ConfigDict(ser_json_bytes="base64")

    command: str
    row_count: int | None = None
    rows: list[Row] = Field(default_factory=list)
    fields: list[str] = Field(default_factory=list)

"""Statement and conflict-resolution models."""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict


class Statement(NamedTuple):
    """SQL text plus the values bound to its placeholders, in order."""

    sql: str
    values: tuple[Any, ...]


class OnConflictUpdate(BaseModel):
    """Upsert behavior for a generated INSERT.

    Example::

        OnConflictUpdate(conflict_fields="id", condition="WHERE t.ts < EXCLUDED.ts")

    expands to ``ON CONFLICT (id) DO UPDATE SET id=EXCLUDED.id,... WHERE t.ts < EXCLUDED.ts``.
    ``condition`` is inserted verbatim and must never carry untrusted text.
    """

    model_config = ConfigDict(frozen=True)

    conflict_fields: str | list[str]
    condition: str | None = None

    @property
    def target(self) -> str:
        """Conflict target as rendered inside the parentheses."""
        if isinstance(self.conflict_fields, str):
            return self.conflict_fields.strip()
        return ",".join(f.strip() for f in self.conflict_fields if f.strip())

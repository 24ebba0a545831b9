"""Engine tags and pool configuration."""

from enum import StrEnum

from pydantic import BaseModel, Field


class Engine(StrEnum):
    """Supported database engines."""

    POSTGRES = "pg"
    SQLITE = "sq3"


class PoolOptions(BaseModel):
    """Configuration record handed to a pool at construction."""

    engine: Engine
    database: str = Field(min_length=1)  # database name, or file path for SQLite
    readonly: bool | None = None  # SQLite only
    host: str | None = None
    user: str | None = None
    port: int | None = Field(default=None, gt=0, lt=65536)
    ca_certificate_file: str | None = None
    reject_unauthorized: bool = False

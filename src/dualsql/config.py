"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_cert_dir() -> Path:
    """Return the CA certificate directory from DUALSQL_CERT_DIR."""
    raw = os.environ.get("DUALSQL_CERT_DIR", "~/.config")
    return Path(raw).expanduser()


def get_pg_pool_min() -> int:
    """Return the minimum Postgres pool size from DUALSQL_PG_POOL_MIN."""
    return int(os.environ.get("DUALSQL_PG_POOL_MIN", "1"))


def get_pg_pool_max() -> int:
    """Return the maximum Postgres pool size from DUALSQL_PG_POOL_MAX."""
    return int(os.environ.get("DUALSQL_PG_POOL_MAX", "20"))


def get_pg_idle_timeout() -> float:
    """Return the pooled connection idle timeout in seconds from DUALSQL_PG_IDLE_TIMEOUT."""
    return float(os.environ.get("DUALSQL_PG_IDLE_TIMEOUT", "20.0"))


def get_pg_connect_timeout() -> float:
    """Return the connect/acquire timeout in seconds from DUALSQL_PG_CONNECT_TIMEOUT."""
    return float(os.environ.get("DUALSQL_PG_CONNECT_TIMEOUT", "10.0"))


def get_password() -> str | None:
    """Return the database password from DUALSQL_PASSWORD, if set."""
    return os.environ.get("DUALSQL_PASSWORD") or None


def get_log_level() -> str:
    """Return the logging level from DUALSQL_LOG_LEVEL."""
    return os.environ.get("DUALSQL_LOG_LEVEL", "WARNING")

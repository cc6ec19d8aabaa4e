"""
Database connection factory for layoutbench.

Every scenario and the seeder run on one dedicated, synchronous, autocommit
connection, so each statement is acknowledged on its own. Establishing the
connection is retried with tenacity for transient failures; statements
issued on it are never retried.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from layoutbench.config import get_settings
from layoutbench.errors import ConnectionFailed
from layoutbench.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn() -> str:
    """Return `DATABASE_URL` if set, otherwise compose a DSN from settings."""
    settings = get_settings()
    if settings.database_url:
        return settings.database_url
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def get_sync_connection(dsn: Optional[str] = None, attempts: Optional[int] = None) -> Connection:
    """
    Acquire a dedicated autocommit connection.

    Parameters
    ----------
    dsn : str, optional
        Connection string; defaults to `build_dsn()`.
    attempts : int, optional
        Connection attempts before giving up; defaults to
        `settings.db_connect_attempts`.

    Raises
    ------
    ConnectionFailed
        If every attempt fails.
    """
    conninfo = dsn or build_dsn()
    max_attempts = attempts or get_settings().db_connect_attempts
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    )
    try:
        return retrying(psycopg.connect, conninfo, autocommit=True)
    except RetryError as exc:
        cause = exc.last_attempt.exception()
        log.error(
            "[CONNECT FAILED]",
            extra={"attempts": max_attempts, "error": str(cause)},
        )
        raise ConnectionFailed("Unable to connect to database", detail=str(cause)) from cause
    except psycopg.Error as exc:
        log.error("[CONNECT FAILED]", extra={"attempts": 1, "error": str(exc)})
        raise ConnectionFailed("Unable to connect to database", detail=str(exc)) from exc


__all__ = ["build_dsn", "get_sync_connection"]

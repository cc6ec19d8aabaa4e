"""
Table DDL for layoutbench.

Both tables share one shape: the `jsonb` document column `j` followed by the
twelve typed columns mirroring the record. The seed table is long-lived and
indexed by id; the scratch table is dropped and recreated before each insert
run so every run starts from an empty target.
"""

from __future__ import annotations

import psycopg
from psycopg import Connection, sql

from layoutbench.errors import StatementFailed
from layoutbench.utils.logging import get_logger

log = get_logger(__name__)

_COLUMNS_DDL = sql.SQL(
    """
    j jsonb,
    id integer,
    name character varying,
    status character varying,
    last_updated_at timestamp without time zone,
    last_modified_at timestamp without time zone,
    num integer,
    num2 integer,
    updated_at timestamp without time zone,
    created_at timestamp without time zone,
    jumbled_at timestamp without time zone,
    secret_code character varying,
    entries integer
    """
)


def _execute(conn: Connection, statement: sql.Composable, action: str) -> None:
    try:
        conn.execute(statement)
    except psycopg.Error as exc:
        raise StatementFailed(f"Failed to {action}", detail=str(exc)) from exc


def ensure_seed_table(conn: Connection, table: str) -> None:
    """Create the seed table and its id index if they do not exist."""
    _execute(
        conn,
        sql.SQL("CREATE TABLE IF NOT EXISTS {table} ({columns})").format(
            table=sql.Identifier(table), columns=_COLUMNS_DDL
        ),
        f"create table {table}",
    )
    _execute(
        conn,
        sql.SQL("CREATE INDEX IF NOT EXISTS {index} ON {table} (id)").format(
            index=sql.Identifier(f"idx_{table}_id"), table=sql.Identifier(table)
        ),
        f"create index on {table}",
    )
    log.info(f"[SCHEMA] {table} ready", extra={"table": table})


def drop_table(conn: Connection, table: str) -> None:
    _execute(
        conn,
        sql.SQL("DROP TABLE IF EXISTS {table}").format(table=sql.Identifier(table)),
        f"drop table {table}",
    )


def reset_scratch_table(conn: Connection, table: str) -> None:
    """Drop and recreate the scratch table."""
    drop_table(conn, table)
    _execute(
        conn,
        sql.SQL("CREATE TABLE {table} ({columns})").format(
            table=sql.Identifier(table), columns=_COLUMNS_DDL
        ),
        f"create table {table}",
    )
    log.debug(f"[SCHEMA] {table} reset", extra={"table": table})


def count_rows(conn: Connection, table: str) -> int:
    """Return the number of rows in `table`."""
    query = sql.SQL("SELECT count(*) FROM {table}").format(table=sql.Identifier(table))
    try:
        row = conn.execute(query).fetchone()
    except psycopg.Error as exc:
        raise StatementFailed(f"Failed to count rows in {table}", detail=str(exc)) from exc
    return int(row[0]) if row else 0


__all__ = ["count_rows", "drop_table", "ensure_seed_table", "reset_scratch_table"]

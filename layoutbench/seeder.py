"""
Seed table population for layoutbench.

Writes `make_record(i)` for every `i` in `[0, rows)`, one INSERT per record,
storing the document in `j` and the same values in the typed columns, so the
document reads and the typed-column reads run against one population.

A failed insert stops seeding immediately. Nothing is retried: a partially
seeded table is a visible failure, and retries would make the seeding time
misleading.
"""

from __future__ import annotations

import psycopg
from psycopg import Connection, sql
from psycopg.types.json import Jsonb

from layoutbench.domain.generator import make_record
from layoutbench.domain.models import COLUMNS, DOCUMENT_COLUMN
from layoutbench.errors import SeedError
from layoutbench.infrastructure.schema import count_rows, drop_table, ensure_seed_table
from layoutbench.utils.logging import get_logger

log = get_logger(__name__)


def _insert_statement(table: str) -> sql.Composed:
    columns = (DOCUMENT_COLUMN, *COLUMNS)
    return sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
        table=sql.Identifier(table),
        columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
        values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )


def prepare_seed_table(conn: Connection, table: str = "perf", reset: bool = False) -> None:
    """
    Make `table` an empty, indexed seed table.

    With `reset` the table is dropped and recreated first. Without it, a
    table that already holds rows is refused.

    Raises
    ------
    SeedError
        If `table` already holds rows and `reset` is False.
    """
    if reset:
        drop_table(conn, table)
        log.info(f"[SEED RESET] {table}", extra={"table": table})
    ensure_seed_table(conn, table)
    existing = count_rows(conn, table)
    if existing:
        raise SeedError(
            f"Seed table '{table}' already holds {existing} rows",
            detail="rerun with --reset to replace them",
        )


def seed(
    conn: Connection,
    rows: int = 2_000_000,
    table: str = "perf",
    progress_every: int = 100_000,
) -> int:
    """
    Insert `rows` generated records into `table`, in index order.

    Returns
    -------
    int
        Number of rows written.

    Raises
    ------
    SeedError
        On the first failed insert; earlier rows stay committed.
    """
    statement = _insert_statement(table)
    log.info(f"[SEED START] {table}", extra={"table": table, "rows": rows})

    for i in range(rows):
        if i % progress_every == 0:
            log.info(f"[SEED] {i}", extra={"table": table, "seeded": i})

        record = make_record(i)
        try:
            conn.execute(statement, (Jsonb(record.to_document()), *record.column_values()))
        except psycopg.Error as exc:
            log.error(f"[SEED FAILED] at index {i}", extra={"table": table, "index": i})
            raise SeedError(f"Insert failed at index {i}", detail=str(exc)) from exc

    log.info(f"[SEED COMPLETE] {table}", extra={"table": table, "rows": rows})
    return rows


def verify_seed(conn: Connection, rows: int, table: str = "perf") -> None:
    """
    Check that `table` holds exactly `rows` rows with ids forming `[0, rows)`.

    Raises
    ------
    SeedError
        If the population is incomplete, duplicated or out of range.
    """
    query = sql.SQL("SELECT count(*), count(DISTINCT id), min(id), max(id) FROM {table}").format(
        table=sql.Identifier(table)
    )
    try:
        total, distinct, low, high = conn.execute(query).fetchone()
    except psycopg.Error as exc:
        raise SeedError(f"Failed to inspect {table}", detail=str(exc)) from exc

    expected = (rows, rows, 0, rows - 1) if rows else (0, 0, None, None)
    found = (total, distinct, low, high)
    if found != expected:
        raise SeedError(
            f"{table} does not hold ids [0, {rows})",
            detail=f"count={total} distinct={distinct} min={low} max={high}",
        )
    log.info(f"[SEED VERIFIED] {table}", extra={"table": table, "rows": rows})


__all__ = ["prepare_seed_table", "seed", "verify_seed"]

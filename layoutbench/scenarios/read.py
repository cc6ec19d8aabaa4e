"""
Read scenarios: select every seeded row and decode it.

Each pair varies only the storage layout while keeping the number of
returned columns and the decode path the same. The hybrid variant extracts
every field from the document at query time, separating the cost of
server-side coercion from the cost of decoding pre-typed columns. The narrow
variants select one field, separating per-row overhead from payload size.

Rows are streamed and decoded as they arrive; the decoded records of an
iteration are held until the iteration ends.
"""

from __future__ import annotations

import abc
from typing import Callable, Optional, Sequence

import psycopg
import typer
from psycopg import Connection, sql

from layoutbench.config import Settings
from layoutbench.decoder import (
    FIELD_KINDS,
    Slot,
    SlotKind,
    field_slots,
    record_slots,
    scan_rows,
    slots_for,
)
from layoutbench.domain.models import COLUMNS, DOCUMENT_COLUMN, Record
from layoutbench.errors import BenchmarkError, StatementFailed
from layoutbench.infrastructure.schema import count_rows
from layoutbench.scenarios.abstract import AbstractScenario, Layout, Operation

_CASTS = {
    SlotKind.INTEGER: "int",
    SlotKind.OPTIONAL_INTEGER: "int",
    SlotKind.OPTIONAL_TIMESTAMP: "timestamp",
}


def extract_field(field: str) -> sql.Composable:
    """`j->>'field'`, cast to the field's column type where it is not text."""
    expr = sql.SQL("{doc}->>{key}").format(
        doc=sql.Identifier(DOCUMENT_COLUMN), key=sql.Literal(field)
    )
    cast = _CASTS.get(FIELD_KINDS[field])
    if cast is None:
        return expr
    return sql.SQL("({expr})::{cast}").format(expr=expr, cast=sql.SQL(cast))


def _print_marker(record: Record) -> None:
    typer.echo(".", nl=False)


class _ReadScenario(AbstractScenario):
    operation = Operation.READ
    slots: Sequence[Slot] = ()

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_progress: Optional[Callable[[Record], None]] = _print_marker,
    ) -> None:
        super().__init__(settings)
        self._on_progress = on_progress
        self._marked = False

    @abc.abstractmethod
    def _projection(self) -> sql.Composable:  # pragma: no cover - interface only
        raise NotImplementedError

    def setup(self, conn: Connection) -> None:
        super().setup(conn)
        table = self.settings.seed_table
        if count_rows(conn, table) == 0:
            raise BenchmarkError(
                f"Seed table '{table}' is empty", detail="run `layoutbench seed` first"
            )
        self._query = sql.SQL("SELECT {projection} FROM {table}").format(
            projection=self._projection(), table=sql.Identifier(table)
        )

    def _progress(self, record: Record) -> None:
        self._marked = True
        if self._on_progress is not None:
            self._on_progress(record)

    def run_once(self, n: int) -> int:
        try:
            with self.conn.cursor() as cur:
                records = scan_rows(
                    cur.stream(self._query),
                    self.slots,
                    on_progress=self._progress,
                    progress_every=self.settings.progress_every,
                )
        except psycopg.Error as exc:
            raise StatementFailed(
                f"Scenario '{self.name}' failed at iteration {n}", detail=str(exc)
            ) from exc
        return len(records)

    def teardown(self) -> None:
        if self._marked and self._on_progress is _print_marker:
            typer.echo()
        self._marked = False
        super().teardown()


class SelectDocumentScenario(_ReadScenario):
    """Select the document column and decode it into a Record."""

    name = "select_document"
    description = "SELECT j; decode each document into a Record."
    layout = Layout.DOCUMENT
    slots = record_slots()

    def _projection(self) -> sql.Composable:
        return sql.Identifier(DOCUMENT_COLUMN)


class SelectColumnsScenario(_ReadScenario):
    """Select every typed column and bind each to its own slot."""

    name = "select_columns"
    description = "SELECT the twelve typed columns; bind one slot per column."
    layout = Layout.COLUMNS
    slots = field_slots()

    def _projection(self) -> sql.Composable:
        return sql.SQL(", ").join(sql.Identifier(c) for c in COLUMNS)


class SelectExtractedFieldsScenario(_ReadScenario):
    """Extract and cast every field from the document at query time."""

    name = "select_extracted_fields"
    description = "SELECT (j->>field)::type for every field; bind one slot per field."
    layout = Layout.HYBRID
    slots = field_slots()

    def _projection(self) -> sql.Composable:
        return sql.SQL(", ").join(extract_field(c) for c in COLUMNS)


class SelectExtractedIdScenario(_ReadScenario):
    """Extract only the id from the document."""

    name = "select_extracted_id"
    description = "SELECT (j->>'id')::int; bind one slot."
    operation = Operation.NARROW_READ
    layout = Layout.DOCUMENT
    slots = slots_for("id")

    def _projection(self) -> sql.Composable:
        return extract_field("id")


class SelectIdColumnScenario(_ReadScenario):
    """Select only the id column."""

    name = "select_id_column"
    description = "SELECT id; bind one slot."
    operation = Operation.NARROW_READ
    layout = Layout.COLUMNS
    slots = slots_for("id")

    def _projection(self) -> sql.Composable:
        return sql.Identifier("id")


__all__ = [
    "SelectColumnsScenario",
    "SelectDocumentScenario",
    "SelectExtractedFieldsScenario",
    "SelectExtractedIdScenario",
    "SelectIdColumnScenario",
    "extract_field",
]

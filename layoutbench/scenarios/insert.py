"""
Insert scenarios: one generated record per iteration into the scratch table.

Both variants drop and recreate the scratch table in `setup`, so each run
writes into an empty table of the same shape.
"""

from __future__ import annotations

from typing import Tuple

from psycopg import Connection, sql
from psycopg.types.json import Jsonb

from layoutbench.domain.generator import make_record
from layoutbench.domain.models import COLUMNS, DOCUMENT_COLUMN
from layoutbench.infrastructure.schema import reset_scratch_table
from layoutbench.scenarios.abstract import AbstractScenario, Layout, Operation


class _InsertScenario(AbstractScenario):
    operation = Operation.INSERT
    columns: Tuple[str, ...] = ()

    def setup(self, conn: Connection) -> None:
        super().setup(conn)
        reset_scratch_table(conn, self.settings.scratch_table)
        self._query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=sql.Identifier(self.settings.scratch_table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in self.columns),
            values=sql.SQL(", ").join(sql.Placeholder() * len(self.columns)),
        )


class InsertDocumentScenario(_InsertScenario):
    """Insert the record as a single jsonb value."""

    name = "insert_document"
    description = "INSERT one record into the document column."
    layout = Layout.DOCUMENT
    columns = (DOCUMENT_COLUMN,)

    def run_once(self, n: int) -> int:
        record = make_record(n + 1)
        return self._execute(self._query, (Jsonb(record.to_document()),), n)


class InsertColumnsScenario(_InsertScenario):
    """Insert the record as twelve typed column values."""

    name = "insert_columns"
    description = "INSERT one record into the typed columns."
    layout = Layout.COLUMNS
    columns = COLUMNS

    def run_once(self, n: int) -> int:
        record = make_record(n + 1)
        return self._execute(self._query, record.column_values(), n)


__all__ = ["InsertColumnsScenario", "InsertDocumentScenario"]

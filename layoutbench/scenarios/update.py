"""
Update scenarios: patch two fields of one seeded row per iteration.

Iteration `n` targets `id = n + 1` and sets `name = 'UpdateName:<n>'` and
`num = n`. The document variant rewrites only those two keys of `j` with
`jsonb_set`; the typed variant rewrites only those two columns. Neither
touches any other field.
"""

from __future__ import annotations

from psycopg import Connection, sql

from layoutbench.scenarios.abstract import AbstractScenario, Layout, Operation


def update_params(n: int) -> tuple[str, int, int]:
    """Statement parameters for iteration `n`: (name, num, id)."""
    return f"UpdateName:{n}", n, n + 1


class UpdateDocumentFieldsScenario(AbstractScenario):
    """Merge two fields into the stored document in place."""

    name = "update_document_fields"
    description = "UPDATE two keys inside the document with jsonb_set."
    operation = Operation.UPDATE
    layout = Layout.DOCUMENT

    def setup(self, conn: Connection) -> None:
        super().setup(conn)
        # Doubled braces are literal jsonb paths, not format fields.
        self._query = sql.SQL(
            "UPDATE {table} SET j = jsonb_set("
            "jsonb_set(j, '{{name}}', to_jsonb(%s::text)), '{{num}}', to_jsonb(%s::int)"
            ") WHERE id = %s"
        ).format(table=sql.Identifier(self.settings.seed_table))

    def run_once(self, n: int) -> int:
        return self._execute(self._query, update_params(n), n)


class UpdateColumnsScenario(AbstractScenario):
    """Update two typed columns by name."""

    name = "update_columns"
    description = "UPDATE the name and num columns."
    operation = Operation.UPDATE
    layout = Layout.COLUMNS

    def setup(self, conn: Connection) -> None:
        super().setup(conn)
        self._query = sql.SQL("UPDATE {table} SET name = %s, num = %s WHERE id = %s").format(
            table=sql.Identifier(self.settings.seed_table)
        )

    def run_once(self, n: int) -> int:
        return self._execute(self._query, update_params(n), n)


__all__ = ["UpdateColumnsScenario", "UpdateDocumentFieldsScenario", "update_params"]

"""
Scenario interfaces for layoutbench.

A scenario is one timed operation against one storage layout. The caller
owns the iteration policy: it opens a connection, calls `setup` once, calls
`run_once(n)` for `n = 0, 1, 2, ...` timing each call, then calls
`teardown`. Iterations are independent; the only state shared between them
is the connection and whatever `setup` prepared.
"""

from __future__ import annotations

import abc
import enum
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import psycopg
from psycopg import Connection

from layoutbench.config import Settings, get_settings
from layoutbench.errors import BenchmarkError, StatementFailed


class Operation(str, enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    READ = "read"
    NARROW_READ = "narrow_read"


class Layout(str, enum.Enum):
    DOCUMENT = "document"
    COLUMNS = "columns"
    HYBRID = "hybrid"


@runtime_checkable
class Scenario(Protocol):
    """
    Common interface all scenarios implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the statement issued.
    operation : Operation
        Operation class the scenario belongs to.
    layout : Layout
        Storage layout the statement exercises.
    """

    name: str
    description: str
    operation: Operation
    layout: Layout

    def setup(self, conn: Connection) -> None:
        ...

    def run_once(self, n: int) -> int:
        """Run iteration `n` and return the number of rows written or decoded."""
        ...

    def teardown(self) -> None:
        ...


class AbstractScenario(abc.ABC):
    """
    Base class holding the connection between `setup` and `teardown`.

    Subclasses set the class attributes and implement `run_once`.
    """

    name: str
    description: str
    operation: Operation
    layout: Layout

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._conn: Optional[Connection] = None
        self._query: Any = None

    @property
    def conn(self) -> Connection:
        if self._conn is None:
            raise BenchmarkError(f"Scenario '{self.name}' used before setup")
        return self._conn

    def setup(self, conn: Connection) -> None:
        self._conn = conn

    @abc.abstractmethod
    def run_once(self, n: int) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    def teardown(self) -> None:
        self._conn = None

    def _execute(self, query: Any, params: Sequence[Any], n: int) -> int:
        """Execute a write statement and return its affected row count."""
        try:
            cur = self.conn.execute(query, params)
        except psycopg.Error as exc:
            raise StatementFailed(
                f"Scenario '{self.name}' failed at iteration {n}", detail=str(exc)
            ) from exc
        return cur.rowcount


__all__ = [
    "AbstractScenario",
    "Layout",
    "Operation",
    "Scenario",
]

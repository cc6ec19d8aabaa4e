"""
Pytest configuration for layoutbench.

Provides fixtures for:
- In-memory fake connections for unit tests (no database needed)
- Database connection management for integration tests
- Small seeded tables, kept apart from the real `perf`/`perf2` tables
"""

from __future__ import annotations

import os
from typing import Any, Callable, Generator, Iterable, List, Optional, Sequence, Tuple

import psycopg
import pytest
from psycopg import sql

from layoutbench.config import Settings
from layoutbench.infrastructure.schema import ensure_seed_table, reset_scratch_table
from layoutbench.seeder import seed

TEST_SEED_TABLE = "perf_test"
TEST_SCRATCH_TABLE = "perf2_test"
SMALL_SEED_ROWS = 100


class FakeCursor:
    """Cursor stand-in: yields canned rows and records what it was asked."""

    def __init__(
        self,
        rows: Sequence[Sequence[Any]] = (),
        one: Optional[Tuple[Any, ...]] = None,
        rowcount: int = 1,
        stream_error: Optional[Exception] = None,
    ) -> None:
        self._rows = list(rows)
        self._one = one
        self.rowcount = rowcount
        self._stream_error = stream_error
        self.streamed: List[Any] = []

    def fetchone(self) -> Optional[Tuple[Any, ...]]:
        return self._one

    def stream(self, query: Any) -> Iterable[Sequence[Any]]:
        self.streamed.append(query)
        if self._stream_error is not None:
            raise self._stream_error
        yield from self._rows

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakeConnection:
    """
    Connection stand-in recording every executed statement.

    `fail_at` makes the Nth `execute` call (0-based) raise an OperationalError.
    """

    def __init__(
        self,
        rows: Sequence[Sequence[Any]] = (),
        one: Optional[Tuple[Any, ...]] = (1,),
        fail_at: Optional[int] = None,
        stream_error: Optional[Exception] = None,
    ) -> None:
        self.rows = rows
        self.one = one
        self.fail_at = fail_at
        self.stream_error = stream_error
        self.executed: List[Tuple[Any, Any]] = []
        self.cursors: List[FakeCursor] = []
        self.closed = False

    def execute(self, query: Any, params: Any = None) -> FakeCursor:
        if self.fail_at is not None and len(self.executed) == self.fail_at:
            self.executed.append((query, params))
            raise psycopg.OperationalError("connection lost")
        self.executed.append((query, params))
        return FakeCursor(one=self.one)

    def cursor(self) -> FakeCursor:
        cur = FakeCursor(rows=self.rows, stream_error=self.stream_error)
        self.cursors.append(cur)
        return cur

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeConnection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.close()

    @property
    def params(self) -> List[Any]:
        return [params for _, params in self.executed]


@pytest.fixture
def fake_conn() -> Callable[..., FakeConnection]:
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def unit_settings() -> Settings:
    """Settings with small, explicit values and no `.env` lookup."""
    return Settings(
        _env_file=None,
        seed_table="perf",
        scratch_table="perf2",
        seed_rows=10,
        progress_every=5,
        write_iterations=3,
        read_iterations=2,
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "layoutbench"),
        seed_table=TEST_SEED_TABLE,
        scratch_table=TEST_SCRATCH_TABLE,
        seed_rows=SMALL_SEED_ROWS,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    if test_settings.database_url:
        return test_settings.database_url
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to skip integration tests when no database is available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


def _drop(conn: psycopg.Connection, table: str) -> None:
    conn.execute(sql.SQL("DROP TABLE IF EXISTS {table}").format(table=sql.Identifier(table)))


@pytest.fixture(scope="function")
def clean_tables(
    db_connection: psycopg.Connection, test_settings: Settings
) -> Generator[psycopg.Connection, None, None]:
    """
    Start each test from an empty seed table and an empty scratch table.
    """
    _drop(db_connection, test_settings.seed_table)
    ensure_seed_table(db_connection, test_settings.seed_table)
    reset_scratch_table(db_connection, test_settings.scratch_table)
    yield db_connection
    _drop(db_connection, test_settings.seed_table)
    _drop(db_connection, test_settings.scratch_table)


@pytest.fixture(scope="function")
def seeded_db_small(clean_tables: psycopg.Connection, test_settings: Settings) -> int:
    """
    Seed a small population (100 rows) for quick integration tests.

    Returns the number of rows seeded.
    """
    return seed(
        clean_tables,
        rows=test_settings.seed_rows,
        table=test_settings.seed_table,
        progress_every=50,
    )

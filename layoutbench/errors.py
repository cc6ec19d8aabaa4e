"""Error hierarchy for layoutbench.

Every error is fatal to the current run: nothing here is retried or skipped,
since a masked failure would distort the timings being measured.
"""

from __future__ import annotations

from typing import Optional


class BenchmarkError(Exception):
    """Base exception for all harness failures."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class ConnectionFailed(BenchmarkError):
    """The database connection could not be established."""


class StatementFailed(BenchmarkError):
    """An insert, update or select statement failed."""


class DecodeError(BenchmarkError):
    """A result row did not match the destination slots it was bound to."""


class SeedError(BenchmarkError):
    """Seeding or seed verification failed."""


__all__ = [
    "BenchmarkError",
    "ConnectionFailed",
    "StatementFailed",
    "DecodeError",
    "SeedError",
]

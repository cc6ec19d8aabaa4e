"""
layoutbench - jsonb document vs. typed column storage benchmarks for PostgreSQL.

Measures what storing a semi-structured record as one `jsonb` document costs
compared with storing it as one typed column per field, across:

- Single-record inserts
- Two-field partial updates (jsonb_set vs. column UPDATE)
- Full-row reads with decode (document, typed columns, query-time extraction)
- Narrow single-field reads with decode

The harness is single-connection and single-threaded, and it emits raw
per-iteration timings only.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from layoutbench.config import Settings, get_settings
from layoutbench.decoder import Slot, SlotKind, decode_row, scan_rows
from layoutbench.domain import Record, make_record
from layoutbench.errors import (
    BenchmarkError,
    ConnectionFailed,
    DecodeError,
    SeedError,
    StatementFailed,
)
from layoutbench.orchestrator import RunConfig, available_scenarios, run_scenarios
from layoutbench.scenarios.abstract import AbstractScenario, Layout, Operation, Scenario
from layoutbench.seeder import prepare_seed_table, seed, verify_seed
from layoutbench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Record",
    "make_record",
    # Decoding
    "Slot",
    "SlotKind",
    "decode_row",
    "scan_rows",
    # Seeding
    "prepare_seed_table",
    "seed",
    "verify_seed",
    # Orchestration
    "RunConfig",
    "available_scenarios",
    "run_scenarios",
    # Scenario abstractions
    "AbstractScenario",
    "Layout",
    "Operation",
    "Scenario",
    # Errors
    "BenchmarkError",
    "ConnectionFailed",
    "DecodeError",
    "SeedError",
    "StatementFailed",
    # Logging
    "configure_logging",
    "get_logger",
]

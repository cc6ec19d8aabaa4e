"""
Infrastructure package for layoutbench.

Centralizes database connectivity and DDL. Keep this layer focused on I/O and
resource management, decoupled from scenario/orchestrator logic.
"""

from layoutbench.infrastructure.db_factory import build_dsn, get_sync_connection
from layoutbench.infrastructure.schema import (
    count_rows,
    drop_table,
    ensure_seed_table,
    reset_scratch_table,
)

__all__ = [
    "build_dsn",
    "count_rows",
    "drop_table",
    "ensure_seed_table",
    "get_sync_connection",
    "reset_scratch_table",
]

"""
Orchestrator for running scenarios, timing iterations and persisting results.

Usage (example from CLI):
    from layoutbench.orchestrator import RunConfig, run_scenarios

    results = run_scenarios(RunConfig(scenario_names=["insert_document"], iterations=1000))

Each scenario gets its own connection. Its timed loop runs inside
`profile_block`, and every iteration is timed on its own with
`time.perf_counter`. The raw timings are returned as-is; summarizing them is
left to downstream tooling. Any failure is fatal: teardown runs, the
connection is closed and the error propagates.

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from psycopg import Connection

from layoutbench.config import Settings, get_settings
from layoutbench.infrastructure.db_factory import get_sync_connection
from layoutbench.scenarios.abstract import Operation, Scenario
from layoutbench.scenarios.insert import InsertColumnsScenario, InsertDocumentScenario
from layoutbench.scenarios.read import (
    SelectColumnsScenario,
    SelectDocumentScenario,
    SelectExtractedFieldsScenario,
    SelectExtractedIdScenario,
    SelectIdColumnScenario,
)
from layoutbench.scenarios.update import UpdateColumnsScenario, UpdateDocumentFieldsScenario
from layoutbench.utils.logging import get_logger
from layoutbench.utils.profiler import profile_block

log = get_logger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """
    What to run and how often.

    `iterations` of None means: `settings.write_iterations` for insert and
    update scenarios, `settings.read_iterations` for read scenarios.
    """

    scenario_names: List[str] = field(default_factory=lambda: ["all"])
    iterations: Optional[int] = None
    warmup: bool = False
    persist: bool = True
    results_dir: Optional[str] = None


def _scenario_factories(settings: Settings) -> Dict[str, Callable[[], Scenario]]:
    """Registry of available scenarios, in run order."""
    return {
        "insert_document": lambda: InsertDocumentScenario(settings),
        "insert_columns": lambda: InsertColumnsScenario(settings),
        "update_document_fields": lambda: UpdateDocumentFieldsScenario(settings),
        "update_columns": lambda: UpdateColumnsScenario(settings),
        "select_document": lambda: SelectDocumentScenario(settings),
        "select_columns": lambda: SelectColumnsScenario(settings),
        "select_extracted_fields": lambda: SelectExtractedFieldsScenario(settings),
        "select_extracted_id": lambda: SelectExtractedIdScenario(settings),
        "select_id_column": lambda: SelectIdColumnScenario(settings),
    }


def available_scenarios() -> List[str]:
    """List available scenario names, in run order."""
    return list(_scenario_factories(get_settings()).keys())


def _resolve_scenario(name: str, settings: Settings) -> Scenario:
    factories = _scenario_factories(settings)
    if name not in factories:
        raise ValueError(f"Unknown scenario '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


def _default_iterations(scenario: Scenario, settings: Settings) -> int:
    if scenario.operation in (Operation.INSERT, Operation.UPDATE):
        return settings.write_iterations
    return settings.read_iterations


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_scenario(
    scenario: Scenario,
    conn: Connection,
    iterations: int,
    warmup: bool = False,
) -> Dict[str, Any]:
    """
    Run one scenario on an open connection and return its raw timings.

    The warmup iteration, when requested, runs as iteration 0 and is not
    timed; measured iterations then continue from 1 so no update or insert
    targets the same id twice. Teardown always runs, even when setup fails.
    """
    timings: List[float] = []
    rows = 0
    try:
        scenario.setup(conn)
        start = 0
        if warmup:
            scenario.run_once(0)
            start = 1
        with profile_block(scenario.name) as stats:
            for n in range(start, start + iterations):
                began = time.perf_counter()
                rows += scenario.run_once(n)
                timings.append(time.perf_counter() - began)
    finally:
        scenario.teardown()

    return {
        "scenario": scenario.name,
        "operation": scenario.operation.value,
        "layout": scenario.layout.value,
        "iterations": iterations,
        "timings_seconds": timings,
        "total_seconds": stats.duration_seconds,
        "rows": rows,
        "peak_rss_bytes": stats.peak_rss_bytes,
        "cpu_percent": stats.cpu_percent,
    }


def run_scenarios(
    config: Optional[RunConfig] = None,
    connect: Callable[[], Connection] = get_sync_connection,
) -> List[dict]:
    """
    Run the configured scenarios one after another, each on a new connection.

    Parameters
    ----------
    config : RunConfig, optional
        Scenario names (or ["all"]), iteration count, warmup and persistence.
    connect : callable
        Connection factory; one connection is opened per scenario.

    Returns
    -------
    List[dict]
        One result per scenario with raw per-iteration timings.
    """
    config = config or RunConfig()
    settings = get_settings()

    names = list(config.scenario_names)
    if "all" in names:
        names = available_scenarios()
    scenarios = [_resolve_scenario(name, settings) for name in names]

    results: List[dict] = []
    for index, scenario in enumerate(scenarios, start=1):
        iterations = config.iterations or _default_iterations(scenario, settings)
        log.info(
            f"[SCENARIO START {index}/{len(scenarios)}] {scenario.name}",
            extra={"scenario": scenario.name, "iterations": iterations, "warmup": config.warmup},
        )
        conn = connect()
        try:
            result = run_scenario(scenario, conn, iterations, warmup=config.warmup)
        except Exception:
            log.exception(f"[SCENARIO FAILED] {scenario.name}", extra={"scenario": scenario.name})
            raise
        finally:
            conn.close()
        results.append(result)
        log.info(
            f"[SCENARIO COMPLETE] {scenario.name}",
            extra={
                "scenario": scenario.name,
                "iterations": iterations,
                "rows": result["rows"],
                "total_seconds": result["total_seconds"],
            },
        )

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "scenarios": names,
        "results": results,
    }

    if config.persist:
        _persist_results(payload, Path(config.results_dir or settings.results_dir))

    return results


__all__ = [
    "RunConfig",
    "available_scenarios",
    "run_scenario",
    "run_scenarios",
]

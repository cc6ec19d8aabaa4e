from __future__ import annotations

import json
import sys
from typing import List, Optional

import typer

from layoutbench.config import get_settings
from layoutbench.errors import BenchmarkError
from layoutbench.infrastructure.db_factory import get_sync_connection
from layoutbench.infrastructure.schema import ensure_seed_table, reset_scratch_table
from layoutbench.orchestrator import RunConfig, available_scenarios, run_scenarios
from layoutbench.seeder import seed as seed_table
from layoutbench.seeder import prepare_seed_table, verify_seed
from layoutbench.utils.logging import configure_logging

app = typer.Typer(help="jsonb document vs. typed column benchmark CLI.")


def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    target = (
        "DATABASE_URL"
        if settings.database_url
        else f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )
    typer.echo(
        f"DB={target} | seed_table={settings.seed_table} scratch_table={settings.scratch_table} "
        f"seed_rows={settings.seed_rows} write_iterations={settings.write_iterations} "
        f"read_iterations={settings.read_iterations}"
    )


@app.command()
def migrate() -> None:
    """
    Create the seed table and its index, and reset the scratch table.
    """
    _configure()
    settings = get_settings()
    with get_sync_connection() as conn:
        ensure_seed_table(conn, settings.seed_table)
        reset_scratch_table(conn, settings.scratch_table)
    typer.echo(f"Tables ready: {settings.seed_table}, {settings.scratch_table}.")


@app.command()
def seed(
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-r",
        help="Number of records to insert (default from settings).",
    ),
    reset: bool = typer.Option(
        False, "--reset", help="Drop and recreate the seed table before seeding."
    ),
) -> None:
    """
    Create the seed table if needed and insert records 0..rows-1.

    Refuses a seed table that already holds rows unless --reset is given.
    """
    _configure()
    settings = get_settings()
    total_rows = settings.seed_rows if rows is None else rows
    with get_sync_connection() as conn:
        prepare_seed_table(conn, settings.seed_table, reset=reset)
        seed_table(
            conn,
            rows=total_rows,
            table=settings.seed_table,
            progress_every=settings.progress_every,
        )
    typer.echo(f"Seeded {total_rows:,} rows into {settings.seed_table}.")


@app.command()
def verify(
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-r",
        help="Expected number of records (default from settings).",
    ),
) -> None:
    """
    Check that the seed table holds exactly ids 0..rows-1.
    """
    _configure()
    settings = get_settings()
    total_rows = settings.seed_rows if rows is None else rows
    with get_sync_connection() as conn:
        verify_seed(conn, total_rows, table=settings.seed_table)
    typer.echo(f"{settings.seed_table} holds ids [0, {total_rows}).")


@app.command("list")
def list_scenarios() -> None:
    """
    List available scenarios in run order.
    """
    typer.echo("\n".join(available_scenarios()))


@app.command()
def run(
    scenarios: List[str] = typer.Option(
        ["all"],
        "--scenario",
        "-s",
        help="Scenario to run; repeat for several (default: all).",
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        "-n",
        min=1,
        help="Iterations per scenario (default from settings, per operation class).",
    ),
    warmup: bool = typer.Option(False, "--warmup", help="Run one untimed iteration first."),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write results JSON."),
) -> None:
    """
    Run scenarios and print their raw per-iteration timings as JSON.
    """
    unknown = sorted(set(scenarios) - set(available_scenarios()) - {"all"})
    if unknown:
        raise typer.BadParameter(
            f"unknown scenario(s): {', '.join(unknown)}", param_hint="--scenario"
        )
    _configure()
    results = run_scenarios(
        RunConfig(
            scenario_names=list(scenarios),
            iterations=iterations,
            warmup=warmup,
            persist=persist,
        )
    )
    typer.echo(json.dumps(results, indent=2))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except BenchmarkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

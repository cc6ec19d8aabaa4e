from time import sleep

import pytest
from pydantic import ValidationError

from layoutbench import config
from layoutbench.errors import BenchmarkError, StatementFailed
from layoutbench.orchestrator import available_scenarios
from layoutbench.utils import profiler

_ENV_VARS = (
    "DATABASE_URL",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_NAME",
    "SEED_TABLE",
    "SCRATCH_TABLE",
    "SEED_ROWS",
    "PROGRESS_EVERY",
    "WRITE_ITERATIONS",
    "READ_ITERATIONS",
)


def test_settings_defaults(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    settings = config.Settings(_env_file=None)

    assert settings.database_url is None
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_name == "layoutbench"
    assert settings.seed_table == "perf"
    assert settings.scratch_table == "perf2"
    assert settings.seed_rows == 2_000_000
    assert settings.progress_every == 100_000
    assert settings.write_iterations > 0
    assert settings.read_iterations > 0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://bench@db/bench")
    monkeypatch.setenv("SEED_ROWS", "500")

    settings = config.Settings(_env_file=None)

    assert settings.database_url == "postgresql://bench@db/bench"
    assert settings.seed_rows == 500


@pytest.mark.parametrize("table", ["perf; DROP TABLE perf", "1perf", "perf-2", ""])
def test_settings_reject_non_identifier_tables(table):
    with pytest.raises(ValidationError):
        config.Settings(_env_file=None, seed_table=table)


def test_benchmark_error_renders_detail():
    error = StatementFailed("Failed to create table perf", detail="permission denied")

    assert isinstance(error, BenchmarkError)
    assert str(error) == "Failed to create table perf: permission denied"
    assert str(BenchmarkError("plain")) == "plain"


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.peak_rss_bytes is not None and stats.peak_rss_bytes > 0
    assert isinstance(stats.cpu_percent, float)


def test_available_scenarios_contains_every_layout_pair():
    names = available_scenarios()
    assert isinstance(names, list)
    for expected in (
        "insert_document",
        "insert_columns",
        "update_document_fields",
        "update_columns",
        "select_document",
        "select_columns",
        "select_extracted_fields",
        "select_extracted_id",
        "select_id_column",
    ):
        assert expected in names

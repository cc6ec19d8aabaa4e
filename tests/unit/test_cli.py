from __future__ import annotations

import pytest
from typer.testing import CliRunner

from layoutbench import main as cli
from layoutbench.errors import SeedError
from layoutbench.orchestrator import available_scenarios

runner = CliRunner()


def test_list_prints_scenarios_in_run_order() -> None:
    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 0
    assert result.stdout.split() == available_scenarios()


def test_run_rejects_unknown_scenario(monkeypatch) -> None:
    def never_called(*args, **kwargs):
        raise AssertionError("run_scenarios should not be reached")

    monkeypatch.setattr(cli, "run_scenarios", never_called)

    result = runner.invoke(cli.app, ["run", "--scenario", "select_everything"])

    assert result.exit_code == 2


def test_run_passes_options_through(monkeypatch) -> None:
    seen = []

    def fake_run(config):
        seen.append(config)
        return [{"scenario": "select_id_column", "timings_seconds": [0.1]}]

    monkeypatch.setattr(cli, "run_scenarios", fake_run)
    monkeypatch.setattr(cli, "_configure", lambda: None)

    result = runner.invoke(
        cli.app, ["run", "-s", "select_id_column", "-n", "5", "--warmup", "--no-persist"]
    )

    assert result.exit_code == 0, result.output
    (config,) = seen
    assert config.scenario_names == ["select_id_column"]
    assert config.iterations == 5
    assert config.warmup is True
    assert config.persist is False
    assert '"select_id_column"' in result.stdout


def test_main_reports_benchmark_errors(monkeypatch, capsys) -> None:
    def failing_app():
        raise SeedError("Insert failed at index 7", detail="disk full")

    monkeypatch.setattr(cli, "app", failing_app)

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert "Error: Insert failed at index 7: disk full" in capsys.readouterr().err


def test_seed_refuses_populated_table(monkeypatch, fake_conn) -> None:
    conn = fake_conn(one=(7,))
    monkeypatch.setattr(cli, "get_sync_connection", lambda: conn)
    monkeypatch.setattr(cli, "_configure", lambda: None)

    result = runner.invoke(cli.app, ["seed", "--rows", "3"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SeedError)
    assert not any("INSERT" in query.as_string(None) for query, _ in conn.executed)
    assert conn.closed


def test_seed_with_reset_replaces_population(monkeypatch, fake_conn) -> None:
    conn = fake_conn(one=(0,))
    monkeypatch.setattr(cli, "get_sync_connection", lambda: conn)
    monkeypatch.setattr(cli, "_configure", lambda: None)

    result = runner.invoke(cli.app, ["seed", "--rows", "3", "--reset"])

    assert result.exit_code == 0, result.output
    statements = [query.as_string(None) for query, _ in conn.executed]
    assert statements[0].startswith("DROP TABLE IF EXISTS")
    assert sum(s.startswith("INSERT") for s in statements) == 3

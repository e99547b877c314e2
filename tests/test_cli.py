import logging

import pytest
import yaml
from typer.testing import CliRunner

from kschema.cli import cli
from kschema.cli.common import context as context_mod
from kschema.cli.common.logs import ROOT_LOGGER
from kschema.core.errors import ExecutionError

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path, make_cluster):
    monkeypatch.setenv("KSCHEMA_WORK_DIR", str(tmp_path))
    for name in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        context_mod,
        "connect_cluster",
        lambda uri: make_cluster(["db1", "db2", "ops"], uri=uri),
    )

    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "tables.kql"
    path.write_text(".create-merge table T (a:int)\n", encoding="utf-8")
    return path


CLUSTER = "https://fabrikam.westeurope.kusto.windows.net"


def test_targets_resolve_prints_matching_databases():
    result = runner.invoke(cli.app, ["targets", "resolve", "-c", CLUSTER, "--db", "^db"])

    assert result.exit_code == 0, result.output
    assert "db1" in result.output
    assert "ops" not in result.output


def test_targets_resolve_rejects_invalid_regex():
    result = runner.invoke(cli.app, ["targets", "resolve", "-c", CLUSTER, "--db", "("])

    assert result.exit_code == 2


def test_databases_list_rejects_bad_cluster_uri():
    result = runner.invoke(cli.app, ["databases", "list", "-c", "fabrikam.kusto.windows.net"])

    assert result.exit_code == 2


def test_schema_apply_dry_run_writes_job_file(tmp_path, schema_file):
    result = runner.invoke(
        cli.app,
        [
            "schema", "apply",
            "-c", CLUSTER,
            "-f", str(schema_file),
            "--dbs", "db1",
            "--dbs", "db2",
            "--dry-run",
            "--no-confirm",
        ],
    )

    assert result.exit_code == 0, result.output
    jobs = list((tmp_path / "jobs").glob("*.yaml"))
    assert len(jobs) == 1
    doc = yaml.safe_load(jobs[0].read_text(encoding="utf-8"))
    assert list(doc["jobs"]) == ["push-db1", "push-db2"]
    assert list((tmp_path / "schemas").iterdir())


def test_schema_apply_without_filter_requires_all(schema_file):
    result = runner.invoke(
        cli.app,
        ["schema", "apply", "-c", CLUSTER, "-f", str(schema_file), "--dry-run", "--no-confirm"],
    )

    assert result.exit_code == 2


def test_schema_apply_reports_failed_clusters(monkeypatch, schema_file):
    def _fail(self, job_file):
        raise ExecutionError("delta-kusto exited with code 3")

    monkeypatch.setattr(context_mod.DeltaKustoRunner, "apply", _fail)

    result = runner.invoke(
        cli.app,
        ["schema", "apply", "-c", CLUSTER, "-f", str(schema_file), "--dbs", "db1", "--no-confirm"],
    )

    assert result.exit_code == 1


def test_databases_list_without_pattern_lists_every_database():
    result = runner.invoke(cli.app, ["databases", "list", "-c", CLUSTER])

    assert result.exit_code == 0, result.output
    for name in ("db1", "db2", "ops"):
        assert name in result.output


def test_databases_list_filters_by_pattern():
    result = runner.invoke(cli.app, ["databases", "list", "-c", CLUSTER, "--name", "^o"])

    assert result.exit_code == 0, result.output
    assert "ops" in result.output
    assert "db1" not in result.output

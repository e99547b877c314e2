from pathlib import Path
from types import SimpleNamespace

import pytest
import yaml

from kschema.core.adapters import deltakusto
from kschema.core.adapters.deltakusto import (
    DeltaKustoJobGenerator,
    DeltaKustoRunner,
    login_token_provider_from_env,
)
from kschema.core.errors import BuildError, ExecutionError

URI = "https://fabrikam.kusto.windows.net"


def test_generator_writes_one_push_job_per_database(tmp_path):
    generator = DeltaKustoJobGenerator(tmp_path / "jobs")

    path = generator.generate(URI, ["db1", "db 2"], Path("/schemas/s.kql"), True)

    doc = yaml.safe_load(path.read_text())
    assert path.parent == tmp_path / "jobs"
    assert path.name.startswith("delta-fabrikam-")
    assert doc["failIfDataLoss"] is True
    assert doc["sendErrorOptIn"] is False
    assert "tokenProvider" not in doc
    assert list(doc["jobs"]) == ["push-db1", "push-db_2"]
    assert doc["jobs"]["push-db1"] == {
        "current": {"adxDatabase": {"clusterUri": URI, "database": "db1"}},
        "target": {"scripts": [{"filePath": "/schemas/s.kql"}]},
        "action": {"pushToCurrent": True},
    }
    assert doc["jobs"]["push-db_2"]["current"]["adxDatabase"]["database"] == "db 2"


def test_generator_includes_token_provider(tmp_path):
    provider = {"login": {"tenantId": "t", "clientId": "c", "secret": "s"}}
    generator = DeltaKustoJobGenerator(tmp_path, token_provider=provider)

    doc = yaml.safe_load(generator.generate(URI, ["db1"], Path("s.kql"), False).read_text())

    assert doc["tokenProvider"] == provider


def test_generator_write_failure_is_a_build_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(BuildError):
        DeltaKustoJobGenerator(blocker / "jobs").generate(URI, ["db1"], Path("s.kql"), False)


def test_generator_reference_is_unique_per_call(tmp_path):
    generator = DeltaKustoJobGenerator(tmp_path)

    first = generator.generate(URI, ["db1"], Path("s.kql"), False)
    second = generator.generate(URI, ["db1"], Path("s.kql"), False)

    assert first != second


def test_login_token_provider_requires_all_variables(monkeypatch):
    monkeypatch.setenv("AZURE_TENANT_ID", "tenant")
    monkeypatch.setenv("AZURE_CLIENT_ID", "client")
    monkeypatch.delenv("AZURE_CLIENT_SECRET", raising=False)
    assert login_token_provider_from_env() is None

    monkeypatch.setenv("AZURE_CLIENT_SECRET", "secret")
    assert login_token_provider_from_env() == {
        "login": {"tenantId": "tenant", "clientId": "client", "secret": "secret"}
    }


def test_runner_invokes_binary_with_job_file(monkeypatch):
    calls = []

    def _run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return SimpleNamespace(returncode=0, stdout="done", stderr="")

    monkeypatch.setattr(deltakusto.subprocess, "run", _run)

    DeltaKustoRunner("/opt/delta-kusto").apply("/work/jobs/job.yaml")

    assert calls[0][0] == ["/opt/delta-kusto", "-p", "/work/jobs/job.yaml"]
    assert calls[0][1]["check"] is False


def test_runner_non_zero_exit_is_an_execution_error(monkeypatch):
    monkeypatch.setattr(
        deltakusto.subprocess,
        "run",
        lambda cmd, **kw: SimpleNamespace(returncode=3, stdout="", stderr="data loss detected"),
    )

    with pytest.raises(ExecutionError, match="data loss detected"):
        DeltaKustoRunner().apply("job.yaml")


def test_runner_missing_binary_is_an_execution_error(monkeypatch):
    def _run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(deltakusto.subprocess, "run", _run)

    with pytest.raises(ExecutionError) as excinfo:
        DeltaKustoRunner("missing-bin").apply("job.yaml")

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_generator_job_file_is_private_to_owner(tmp_path):
    provider = {"login": {"tenantId": "t", "clientId": "c", "secret": "s3cret"}}
    generator = DeltaKustoJobGenerator(tmp_path / "jobs", token_provider=provider)

    path = generator.generate(URI, ["db1"], Path("s.kql"), False)

    assert "s3cret" in path.read_text()
    assert path.stat().st_mode & 0o077 == 0
    assert (tmp_path / "jobs").stat().st_mode & 0o077 == 0


def test_generator_keeps_databases_whose_names_sanitize_alike(tmp_path):
    generator = DeltaKustoJobGenerator(tmp_path)

    path = generator.generate(URI, ["sales db", "sales_db", "sales-db"], Path("s.kql"), False)

    jobs = yaml.safe_load(path.read_text())["jobs"]
    assert list(jobs) == ["push-sales_db", "push-sales_db-2", "push-sales-db"]
    assert [j["current"]["adxDatabase"]["database"] for j in jobs.values()] == [
        "sales db",
        "sales_db",
        "sales-db",
    ]

from __future__ import annotations

import logging
import os
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from kschema.core.config import azure_app_credentials
from kschema.core.errors import BuildError, ExecutionError

_STDERR_TAIL_LINES = 20


def _job_name(database: str) -> str:
    """Return a delta-kusto job key for a database."""
    return "push-" + re.sub(r"[^A-Za-z0-9_.-]+", "_", database)


def _job_names(databases: Sequence[str]) -> list[str]:
    """Return one distinct job key per database, suffixing keys that sanitize alike."""
    taken: set[str] = set()
    names = []
    for db in databases:
        base = name = _job_name(db)
        n = 2
        while name in taken:
            name = f"{base}-{n}"
            n += 1
        taken.add(name)
        names.append(name)
    return names


def login_token_provider_from_env() -> dict[str, Any] | None:
    """Return a delta-kusto `login` token provider from AZURE_* variables, if all are set."""
    creds = azure_app_credentials()
    if creds is None:
        return None
    tenant_id, client_id, secret = creds
    return {"login": {"tenantId": tenant_id, "clientId": client_id, "secret": secret}}


class DeltaKustoJobGenerator:
    """Generates delta-kusto job files that push a schema file to target databases."""

    def __init__(
        self,
        work_dir: Path,
        *,
        token_provider: Mapping[str, Any] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.work_dir = Path(work_dir)
        self.token_provider = dict(token_provider) if token_provider else None
        self.log = log or logging.getLogger(__name__)

    def job_document(
        self,
        cluster_uri: str,
        databases: Sequence[str],
        schema_file: Path,
        fail_if_data_loss: bool,
    ) -> dict[str, Any]:
        """Return the delta-kusto job document as a plain dict."""
        doc: dict[str, Any] = {
            "sendErrorOptIn": False,
            "failIfDataLoss": fail_if_data_loss,
        }
        if self.token_provider:
            doc["tokenProvider"] = self.token_provider
        doc["jobs"] = {
            name: {
                "current": {
                    "adxDatabase": {"clusterUri": cluster_uri, "database": db}
                },
                "target": {"scripts": [{"filePath": str(schema_file)}]},
                "action": {"pushToCurrent": True},
            }
            for name, db in zip(_job_names(databases), databases)
        }
        return doc

    def generate(
        self,
        cluster_uri: str,
        databases: Sequence[str],
        schema_file: Path,
        fail_if_data_loss: bool,
    ) -> Path:
        """Write a job file for the cluster and return its path."""
        doc = self.job_document(cluster_uri, databases, schema_file, fail_if_data_loss)
        host = cluster_uri.split("://", 1)[-1].split(".", 1)[0] or "cluster"
        # job files may carry a client secret: owner-only directory and file
        try:
            self.work_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix=f"delta-{host}-", suffix=".yaml", dir=self.work_dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                yaml.safe_dump(doc, handle, sort_keys=False)
        except (OSError, yaml.YAMLError) as exc:
            raise BuildError(
                f"Could not write delta-kusto job file under {self.work_dir}: {exc}"
            ) from exc

        path = Path(name)
        self.log.debug("wrote delta-kusto job %s (%d job(s))", path, len(doc["jobs"]))
        return path


class DeltaKustoRunner:
    """Runs delta-kusto job files as a subprocess."""

    def __init__(
        self, binary: str = "delta-kusto", *, log: logging.Logger | None = None
    ) -> None:
        self.binary = binary
        self.log = log or logging.getLogger(__name__)

    def apply(self, job_file: str) -> None:
        """Run `<binary> -p <job_file>` and raise ExecutionError on failure."""
        cmd = [self.binary, "-p", job_file]
        self.log.debug("running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise ExecutionError(f"Could not start {self.binary}: {exc}") from exc

        if result.stdout:
            self.log.debug("%s output:\n%s", self.binary, result.stdout)
        if result.returncode != 0:
            tail = "\n".join((result.stderr or "").splitlines()[-_STDERR_TAIL_LINES:])
            raise ExecutionError(
                f"{self.binary} exited with code {result.returncode} for {job_file}"
                + (f":\n{tail}" if tail else "")
            )

"""Execution of built configurations against the schema apply engine."""

from __future__ import annotations

import logging
from typing import Protocol

from kschema.core.errors import ExecutionError
from kschema.core.execconfig import ExecutionConfiguration

_log = logging.getLogger(__name__)


class SchemaApplier(Protocol):
    """Interface for the external schema apply engine."""

    def apply(self, job_file: str) -> None:
        """Run a job file; raise ExecutionError when the engine reports failure."""
        ...


def execute(
    config: ExecutionConfiguration,
    applier: SchemaApplier,
    *,
    log: logging.Logger | None = None,
) -> None:
    """
    Apply an execution configuration.

    Only the engine's terminal success or failure is observed. There is no
    retry here; a failure is reported to the caller unchanged.

    Raises:
        ExecutionError: The apply engine failed.
    """
    log = log or _log
    log.info(
        "applying %s to %d database(s) on %s",
        config.job_file,
        len(config.databases),
        config.cluster_uri,
    )
    try:
        applier.apply(config.job_file)
    except ExecutionError:
        log.error("schema apply failed on %s", config.cluster_uri)
        raise
    except Exception as exc:  # noqa: BLE001
        log.error("schema apply failed on %s", config.cluster_uri, exc_info=True)
        raise ExecutionError(f"Schema apply failed on {config.cluster_uri}: {exc}") from exc

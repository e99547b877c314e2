"""Execution configuration assembly.

An ExecutionConfiguration ties a stored schema file to a job file generated
for one cluster and its target databases. The job file is produced by an
external generator and treated as an opaque reference.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from kschema.core.errors import BuildError
from kschema.core.schema import SchemaDefinition, SchemaFileStore
from kschema.core.targets import ClusterTargets

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionConfiguration:
    """
    A ready-to-run schema apply job.

    Attributes:
        schema_file: Stored schema definition referenced by the job.
        job_file: Opaque reference to the generated job file.
        cluster_uri: Cluster the job was generated for.
        databases: Target databases the job was generated for.
        fail_if_data_loss: Data-loss flag passed to the generator.
    """

    schema_file: Path
    job_file: str
    cluster_uri: str
    databases: tuple[str, ...]
    fail_if_data_loss: bool


class JobFileGenerator(Protocol):
    """Interface for generating job files for the apply engine."""

    def generate(
        self,
        cluster_uri: str,
        databases: Sequence[str],
        schema_file: Path,
        fail_if_data_loss: bool,
    ) -> str | os.PathLike[str]:
        """Write a job file and return a reference to it."""
        ...


def build_exec_configuration(
    cluster_uri: str,
    databases: Sequence[str],
    schema_file: Path,
    *,
    fail_if_data_loss: bool,
    generator: JobFileGenerator,
    log: logging.Logger | None = None,
) -> ExecutionConfiguration:
    """
    Generate the execution configuration for a set of target databases.

    An empty target set is accepted: the resulting job changes nothing, and
    deciding whether that is useful is left to the caller.

    Raises:
        BuildError: The generator failed or returned an unusable reference.
    """
    log = log or _log
    if not databases:
        log.warning("no target databases on %s; the job will not change anything", cluster_uri)

    try:
        job_ref = generator.generate(
            cluster_uri, list(databases), Path(schema_file), fail_if_data_loss
        )
    except BuildError:
        log.error("failed generating job configuration for %s", cluster_uri)
        raise
    except Exception as exc:  # noqa: BLE001
        log.error("failed generating job configuration for %s", cluster_uri, exc_info=True)
        raise BuildError(f"Job generation failed for {cluster_uri}: {exc}") from exc

    if not isinstance(job_ref, (str, os.PathLike)) or not os.fspath(job_ref):
        raise BuildError(f"Job generator returned an invalid reference: {job_ref!r}")

    return ExecutionConfiguration(
        schema_file=Path(schema_file),
        job_file=os.fspath(job_ref),
        cluster_uri=cluster_uri,
        databases=tuple(databases),
        fail_if_data_loss=fail_if_data_loss,
    )


def create_exec_configuration(
    targets: ClusterTargets,
    schema: SchemaDefinition,
    *,
    store: SchemaFileStore,
    generator: JobFileGenerator,
    fail_if_data_loss: bool,
) -> ExecutionConfiguration:
    """Store the schema, then build the execution configuration for the targets."""
    schema_file = store.store(schema)
    return build_exec_configuration(
        targets.cluster_uri,
        targets.databases,
        schema_file,
        fail_if_data_loss=fail_if_data_loss,
        generator=generator,
    )

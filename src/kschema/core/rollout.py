"""Schema rollout workflow across clusters.

This module strings target resolution, configuration building and execution
together. Each cluster is processed to completion on its own; fan-out only
ever happens across distinct clusters, because a Cluster instance is not
safe for concurrent use.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from kschema.core.cluster import Cluster
from kschema.core.errors import KSchemaError
from kschema.core.execconfig import JobFileGenerator, build_exec_configuration
from kschema.core.executor import SchemaApplier, execute
from kschema.core.filters import TargetFilter
from kschema.core.targets import ClusterTargets, TargetProvider, resolve_targets


class RolloutStatus(str, Enum):
    """
    Outcome of a rollout on one cluster.

    Values:
        SUCCESS: The job file was generated and applied.
        FAILED: Building or applying failed.
        SKIPPED: The job file was generated but not applied (dry run).
    """

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class RolloutResult:
    """Result of a rollout on a single cluster."""

    cluster_uri: str
    status: RolloutStatus
    databases: tuple[str, ...]
    job_file: str | None = None
    error: str | None = None


def resolve_all(
    clusters: Sequence[Cluster],
    target_filter: TargetFilter,
    provider: TargetProvider | None = None,
) -> list[ClusterTargets]:
    """Resolve targets for each cluster in turn; the first failure propagates."""
    return [resolve_targets(c, target_filter, provider) for c in clusters]


def apply_rollout(
    targets: ClusterTargets,
    schema_file: Path,
    *,
    generator: JobFileGenerator,
    applier: SchemaApplier,
    fail_if_data_loss: bool,
    dry_run: bool = False,
) -> RolloutResult:
    """
    Build and apply the execution configuration for one cluster.

    kschema errors are captured in a FAILED result so that one cluster does
    not hide the outcome of the others.
    """
    job_file: str | None = None
    try:
        config = build_exec_configuration(
            targets.cluster_uri,
            targets.databases,
            schema_file,
            fail_if_data_loss=fail_if_data_loss,
            generator=generator,
        )
        job_file = config.job_file
        if dry_run:
            return RolloutResult(
                cluster_uri=targets.cluster_uri,
                status=RolloutStatus.SKIPPED,
                databases=targets.databases,
                job_file=job_file,
            )
        execute(config, applier)
    except KSchemaError as e:
        return RolloutResult(
            cluster_uri=targets.cluster_uri,
            status=RolloutStatus.FAILED,
            databases=targets.databases,
            job_file=job_file,
            error=str(e),
        )

    return RolloutResult(
        cluster_uri=targets.cluster_uri,
        status=RolloutStatus.SUCCESS,
        databases=targets.databases,
        job_file=job_file,
    )


def apply_rollouts(
    plans: Sequence[ClusterTargets],
    schema_file: Path,
    *,
    generator: JobFileGenerator,
    applier: SchemaApplier,
    fail_if_data_loss: bool,
    max_parallel: int,
    dry_run: bool = False,
) -> list[RolloutResult]:
    """
    Apply rollouts on several clusters in parallel.

    Args:
        plans: Resolved targets, at most one entry per cluster.
        schema_file: Stored schema shared by every cluster.
        generator: Job file generator.
        applier: Schema apply engine.
        fail_if_data_loss: Data-loss flag passed to the generator.
        max_parallel: Maximum number of clusters processed concurrently.
        dry_run: Generate job files without applying them.

    Returns:
        One RolloutResult per plan, in the order of `plans`.
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")
    uris = [p.cluster_uri for p in plans]
    if len(set(uris)) != len(uris):
        raise ValueError("each cluster may appear only once per rollout")
    if not plans:
        return []

    results: dict[str, RolloutResult] = {}

    with ThreadPoolExecutor(max_workers=max_parallel) as pool:
        futures = [
            pool.submit(
                apply_rollout,
                plan,
                schema_file,
                generator=generator,
                applier=applier,
                fail_if_data_loss=fail_if_data_loss,
                dry_run=dry_run,
            )
            for plan in plans
        ]

        for f in as_completed(futures):
            result = f.result()
            results[result.cluster_uri] = result

    return [results[uri] for uri in uris]

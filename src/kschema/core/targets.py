"""Core target resolution.

This module decides which databases of a cluster a pending schema change
applies to. It is free of CLI concerns and fails closed: a resolution either
returns the complete target set or raises, never a partial list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol

from kschema.core.adapters.webhook import WebhookTargetProvider
from kschema.core.catalog import list_databases
from kschema.core.cluster import Cluster
from kschema.core.errors import KSchemaError, TargetLookupError
from kschema.core.filters import FilterMode, TargetFilter


@dataclass(frozen=True)
class ClusterTargets:
    """
    Resolved target databases of one cluster.

    Attributes:
        cluster_uri: URI of the cluster the targets belong to.
        databases: Database names in order of first appearance, without duplicates.
        mode: Filter mode that produced the targets.
    """

    cluster_uri: str
    databases: tuple[str, ...]
    mode: FilterMode

    def __len__(self) -> int:
        return len(self.databases)

    def __iter__(self) -> Iterator[str]:
        return iter(self.databases)


class TargetProvider(Protocol):
    """Interface for delegated target lookups."""

    def lookup(self, endpoint: str, cluster_name: str, label: str) -> list[str]:
        """Return the database names the service assigns to (cluster, label)."""
        ...


def unique(names: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicate names, keeping the first occurrence."""
    return tuple(dict.fromkeys(names))


def resolve_targets(
    cluster: Cluster,
    target_filter: TargetFilter,
    provider: TargetProvider | None = None,
) -> ClusterTargets:
    """
    Resolve the target databases of a cluster.

    The first populated filter field wins: ``db`` (regex over live names),
    then ``dbs`` (returned verbatim), then ``webhook`` (delegated lookup).
    With no field set every database in the cluster is selected.

    Args:
        cluster: Cluster whose databases are selected.
        target_filter: Filter describing the selection.
        provider: Lookup client for webhook filters. A WebhookTargetProvider
                  is created when omitted.

    Returns:
        The resolved ClusterTargets.

    Raises:
        InvalidFilterError: The ``db`` pattern is not a valid regex.
        QueryError: The cluster could not be listed.
        TargetLookupError: The lookup service failed.
    """
    log = cluster.log
    mode = target_filter.mode
    ignored = target_filter.populated_modes()[1:]
    if ignored:
        log.warning(
            "filter for %s sets several modes; using %s and ignoring %s",
            cluster.uri,
            mode.value,
            ", ".join(m.value for m in ignored),
        )

    try:
        if mode == FilterMode.SINGLE_DB:
            dbs = list_databases(cluster, target_filter.db)
        elif mode == FilterMode.EXPLICIT_LIST:
            dbs = list(target_filter.dbs)
        elif mode == FilterMode.WEBHOOK:
            provider = provider or WebhookTargetProvider(log=log)
            try:
                dbs = provider.lookup(
                    target_filter.webhook, cluster.name, target_filter.label
                )
            except KSchemaError:
                raise
            except Exception as exc:  # noqa: BLE001
                raise TargetLookupError(
                    f"Target lookup for {cluster.name} at {target_filter.webhook} failed: {exc}"
                ) from exc
        else:
            log.warning("missing db filter - taking all databases in %s", cluster.uri)
            dbs = list_databases(cluster, "")
    except KSchemaError:
        log.error("failed retrieving list of databases for %s", cluster.uri)
        raise

    return ClusterTargets(cluster_uri=cluster.uri, databases=unique(dbs), mode=mode)

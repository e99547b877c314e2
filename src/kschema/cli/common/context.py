"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field

from kschema.cli.common.exits import die, exit_from_error
from kschema.core.adapters.deltakusto import (
    DeltaKustoJobGenerator,
    DeltaKustoRunner,
    login_token_provider_from_env,
)
from kschema.core.adapters.webhook import WebhookTargetProvider
from kschema.core.auth import connect_cluster
from kschema.core.cluster import Cluster
from kschema.core.config import Settings, load_settings
from kschema.core.errors import AuthError, ClusterUriError
from kschema.core.schema import SchemaFileStore


@dataclass
class AppContext:
    """Application context holding settings and the clusters of one invocation."""

    settings: Settings
    clusters: list[Cluster] = field(default_factory=list)

    def close(self) -> None:
        """Close every cluster client."""
        for cluster in self.clusters:
            cluster.close()
        self.clusters.clear()

    def provider(self) -> WebhookTargetProvider:
        """Target lookup client configured from the settings."""
        return WebhookTargetProvider(timeout=self.settings.webhook_timeout)

    def store(self) -> SchemaFileStore:
        """Schema file store under the configured work directory."""
        return SchemaFileStore(self.settings.work_dir / "schemas")

    def generator(self) -> DeltaKustoJobGenerator:
        """delta-kusto job generator under the configured work directory."""
        return DeltaKustoJobGenerator(
            self.settings.work_dir / "jobs",
            token_provider=login_token_provider_from_env(),
        )

    def runner(self) -> DeltaKustoRunner:
        """delta-kusto runner using the configured executable."""
        return DeltaKustoRunner(self.settings.delta_kusto_bin)


def build_context(settings: Settings | None = None) -> AppContext:
    """Build the application context (clusters are connected on demand)."""
    return AppContext(settings=settings or load_settings())


def connect_clusters(appctx: AppContext, cluster_uris: list[str]) -> list[Cluster]:
    """
    Connect to each cluster URI once and register the clusters on the context.

    Exits the CLI on malformed URIs or authentication failures.
    """
    seen: set[str] = set()
    for uri in cluster_uris:
        try:
            cluster = connect_cluster(uri)
        except ClusterUriError as exc:
            exit_from_error(exc)
        except AuthError as exc:
            die(str(exc), code=1)
        if cluster.uri in seen:
            cluster.close()
            continue
        seen.add(cluster.uri)
        appctx.clusters.append(cluster)
    return list(appctx.clusters)

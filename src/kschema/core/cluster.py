"""Core cluster model.

A Cluster pairs a Kusto cluster URI with the query client used to talk to it
and the logger used to report on it. It is intentionally free of Azure SDK
types; see kschema.core.auth for building one against a real cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from kschema.core.catalog import list_databases
from kschema.core.errors import ClusterUriError
from kschema.core.query import QueryClient

_URI_PREFIX = "https://"


def normalize_cluster_uri(uri: str) -> str:
    """
    Normalize a cluster URI.

    - Removes query strings (e.g. '?tenant=...')
    - Removes trailing slashes
    """
    uri = uri.strip().split("?", 1)[0]
    return uri.rstrip("/")


def cluster_name_from_uri(uri: str) -> str:
    """Return the cluster short name (first DNS label) of `https://<name>.<rest>`."""
    if not uri.startswith(_URI_PREFIX):
        raise ClusterUriError(f"Cluster URI must start with {_URI_PREFIX}: {uri!r}")
    name = uri[len(_URI_PREFIX) :].split("/", 1)[0].split(".", 1)[0]
    if not name:
        raise ClusterUriError(f"Cluster URI has no host name: {uri!r}")
    return name


@dataclass
class Cluster:
    """
    A Kusto cluster together with the capabilities used to work on it.

    A Cluster exclusively owns its query client. Calls against one instance
    must be serialized; different instances can be used from different threads.

    Attributes:
        uri: Normalized cluster URI (https://<name>.<region>.kusto.windows.net).
        client: Query capability used for management commands.
        log: Logger receiving this cluster's diagnostics.
    """

    uri: str
    client: QueryClient
    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger("kschema.cluster")
    )
    _databases: list[str] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.uri = normalize_cluster_uri(self.uri)
        # fail closed before anything touches the network
        cluster_name_from_uri(self.uri)

    @property
    def name(self) -> str:
        """Cluster short name, e.g. `fabrikam` for https://fabrikam.kusto.windows.net."""
        return cluster_name_from_uri(self.uri)

    def databases(self, *, refresh: bool = False) -> list[str]:
        """Return all database names, cached after the first successful listing."""
        if self._databases is None or refresh:
            self._databases = list_databases(self, "")
        return list(self._databases)

    def close(self) -> None:
        """Close the query client."""
        self.client.close()

    def __enter__(self) -> Cluster:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

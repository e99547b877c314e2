"""Authentication helpers for Kusto clusters.

This module centralizes creation of an azure-kusto-data KustoClient and the
Cluster built on top of it. Application (service principal) credentials are
used when the AZURE_* variables are all set; otherwise the Azure CLI login
is reused.
"""

from __future__ import annotations

import logging

from azure.kusto.data import KustoClient, KustoConnectionStringBuilder
from azure.kusto.data.exceptions import KustoError

from kschema.core.adapters.kusto import KustoQueryAdapter
from kschema.core.cluster import Cluster, cluster_name_from_uri, normalize_cluster_uri
from kschema.core.config import azure_app_credentials
from kschema.core.errors import AuthError


def _format_auth_error(message: str, uri: str) -> str:
    """Return a user-friendly auth error message."""
    if "az login" in message or "AzureCliCredential" in message:
        return (
            f"Kusto authentication failed for {uri}. Your Azure CLI session is missing.\n"
            "Re-authenticate with:\n  $ az login"
        )
    return f"Kusto authentication failed for {uri}: {message}"


def _connection_string(uri: str) -> KustoConnectionStringBuilder:
    creds = azure_app_credentials()
    if creds:
        tenant_id, client_id, secret = creds
        return KustoConnectionStringBuilder.with_aad_application_key_authentication(
            uri, client_id, secret, tenant_id
        )
    return KustoConnectionStringBuilder.with_az_cli_authentication(uri)


def get_client(cluster_uri: str) -> KustoClient:
    """
    Create and return a KustoClient for a cluster.

    The URI is normalized (query string and trailing slash removed) and
    validated before the client is constructed.
    """
    uri = normalize_cluster_uri(cluster_uri)
    cluster_name_from_uri(uri)
    try:
        return KustoClient(_connection_string(uri))
    except (KustoError, ValueError) as exc:
        raise AuthError(_format_auth_error(str(exc), uri)) from exc


def connect_cluster(cluster_uri: str, log: logging.Logger | None = None) -> Cluster:
    """Return a Cluster backed by a real Kusto client."""
    client = KustoQueryAdapter(get_client(cluster_uri))
    if log is None:
        log = logging.getLogger("kschema.cluster").getChild(
            cluster_name_from_uri(normalize_cluster_uri(cluster_uri))
        )
    return Cluster(uri=cluster_uri, client=client, log=log)

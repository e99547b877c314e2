import pytest

from kschema.core.cluster import Cluster, cluster_name_from_uri, normalize_cluster_uri
from kschema.core.errors import ClusterUriError


def test_cluster_name_from_uri_returns_first_label():
    assert cluster_name_from_uri("https://fabrikam.kusto.windows.net") == "fabrikam"


@pytest.mark.parametrize(
    "uri",
    ["fabrikam.kusto.windows.net", "http://fabrikam.kusto.windows.net", "https://", ""],
)
def test_cluster_name_from_uri_rejects_invalid_input(uri: str):
    with pytest.raises(ClusterUriError):
        cluster_name_from_uri(uri)


def test_normalize_cluster_uri_strips_query_and_trailing_slash():
    assert (
        normalize_cluster_uri(" https://fabrikam.kusto.windows.net/?tenant=x ")
        == "https://fabrikam.kusto.windows.net"
    )


def test_cluster_rejects_malformed_uri(make_cluster):
    with pytest.raises(ClusterUriError):
        make_cluster(uri="fabrikam.kusto.windows.net")


def test_cluster_normalizes_uri_and_exposes_name(make_cluster):
    cluster = make_cluster(uri="https://contoso.eastus.kusto.windows.net/")

    assert cluster.uri == "https://contoso.eastus.kusto.windows.net"
    assert cluster.name == "contoso"


def test_cluster_databases_are_cached_until_refresh(make_cluster):
    cluster = make_cluster(["a", "b"])

    assert cluster.databases() == ["a", "b"]
    assert cluster.databases() == ["a", "b"]
    assert len(cluster.client.calls) == 1

    cluster.databases(refresh=True)
    assert len(cluster.client.calls) == 2


def test_cluster_context_manager_closes_client(make_cluster):
    with make_cluster() as cluster:
        assert cluster.client.closed is False

    assert cluster.client.closed is True


def test_clusters_do_not_share_clients(make_cluster):
    first = make_cluster(["a"])
    second = make_cluster(["b"], uri="https://contoso.kusto.windows.net")

    assert isinstance(first, Cluster)
    assert first.client is not second.client
    assert first.databases() == ["a"]
    assert second.databases() == ["b"]

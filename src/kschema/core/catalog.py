from __future__ import annotations

import re
from contextlib import closing
from typing import TYPE_CHECKING

from kschema.core.errors import InvalidFilterError, QueryError
from kschema.core.query import InlineError

if TYPE_CHECKING:
    from kschema.core.cluster import Cluster

SHOW_DATABASES = ".show databases | project DatabaseName"


def compile_name_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a database name regex, raising InvalidFilterError on bad syntax."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidFilterError(
            f"Invalid database name pattern {pattern!r}: {exc}"
        ) from exc


def list_databases(cluster: Cluster, name_pattern: str = "") -> list[str]:
    """
    List the databases of a cluster whose names match a regex.

    The pattern is validated before the cluster is queried. Per-row inline
    errors are logged and skipped; a terminal failure discards every row
    collected so far and raises QueryError.

    Args:
        cluster: Cluster to query.
        name_pattern: Regular expression searched in each database name.
                      An empty pattern matches every database.

    Returns:
        Matching database names, deduplicated, in the order the cluster
        returned them.
    """
    rx = compile_name_pattern(name_pattern)
    log = cluster.log
    names: list[str] = []
    seen: set[str] = set()

    try:
        with closing(cluster.client.mgmt("", SHOW_DATABASES)) as rows:
            for item in rows:
                if isinstance(item, InlineError):
                    # inline errors do not affect the database listing
                    log.error("got inline error from %s: %s", cluster.uri, item.message)
                    continue
                name = str(item[0])
                if name in seen or not rx.search(name):
                    continue
                seen.add(name)
                names.append(name)
    except QueryError:
        log.error("failed to list databases on %s", cluster.uri, exc_info=True)
        raise
    except Exception as exc:  # noqa: BLE001
        log.error("failed to iterate results from %s", cluster.uri, exc_info=True)
        raise QueryError(f"Failed to list databases on {cluster.uri}: {exc}") from exc

    log.debug("%d database(s) on %s matched %r", len(names), cluster.uri, name_pattern)
    return names

"""Terminal UI utilities for picking target databases."""

from __future__ import annotations

from dataclasses import replace

import questionary

from kschema.cli.common.output import out
from kschema.core.cluster import cluster_name_from_uri
from kschema.core.targets import ClusterTargets

_MAX_DB_NAME_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _database_choice_title(database: str, cluster_name: str, *, name_width: int) -> str:
    """Format one choice as `<database>  (cluster: <name>)` with an aligned cluster column."""
    short_name = _truncate(database, _MAX_DB_NAME_WIDTH)
    return f"{short_name.ljust(name_width)}  (cluster: {cluster_name})"


def select_targets(targets: ClusterTargets) -> ClusterTargets:
    """Display a checkbox prompt to narrow down the databases of one cluster.

    Args:
        targets: Resolved targets; every database starts checked.

    Returns:
        A new ClusterTargets holding only the selected databases.
    """
    cluster_name = cluster_name_from_uri(targets.cluster_uri)
    shown_names = [_truncate(db, _MAX_DB_NAME_WIDTH) for db in targets.databases]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_database_choice_title(db, cluster_name, name_width=name_width),
            value=db,
            checked=True,
        )
        for db in targets.databases
    ]

    picked = out.select_many(f"Select databases on {cluster_name}:", choices)
    return replace(targets, databases=tuple(db for db in targets.databases if db in picked))

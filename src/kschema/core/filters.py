"""Target filter model.

A TargetFilter describes how the databases of a cluster are selected for a
schema change. Exactly one selection mode is meant to be populated; when a
caller fills in more than one, a fixed precedence decides which one applies:

1. ``db``      - regex over the live database names
2. ``dbs``     - explicit list of database names
3. ``webhook`` - delegated lookup through an external service
4. nothing     - every database in the cluster
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from kschema.core.errors import InvalidFilterError


class FilterMode(str, Enum):
    """
    Selection strategy of a TargetFilter.

    Values:
        SINGLE_DB: Regex over live database names.
        EXPLICIT_LIST: Caller-supplied database names, not verified.
        WEBHOOK: Names returned by an external lookup service.
        ALL: No filter set; every database in the cluster.
    """

    SINGLE_DB = "single_db"
    EXPLICIT_LIST = "explicit_list"
    WEBHOOK = "webhook"
    ALL = "all"


@dataclass(frozen=True)
class TargetFilter:
    """
    Selector for the databases of a cluster.

    Attributes:
        db: Regular expression applied to live database names.
        dbs: Explicit database names, used verbatim.
        webhook: Endpoint of the external target lookup service.
        label: Label sent to the lookup service together with the cluster name.
    """

    db: str = ""
    dbs: tuple[str, ...] = ()
    webhook: str = ""
    label: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TargetFilter:
        """Build a filter from a mapping with the keys db, dbs, webhook, label."""
        dbs = data.get("dbs") or ()
        if isinstance(dbs, str) or not all(isinstance(d, str) for d in dbs):
            raise InvalidFilterError("`dbs` must be a list of database names.")
        return cls(
            db=str(data.get("db") or ""),
            dbs=tuple(dbs),
            webhook=str(data.get("webhook") or ""),
            label=str(data.get("label") or ""),
        )

    def populated_modes(self) -> list[FilterMode]:
        """Return every populated mode, in precedence order."""
        modes: list[FilterMode] = []
        if self.db:
            modes.append(FilterMode.SINGLE_DB)
        if self.dbs:
            modes.append(FilterMode.EXPLICIT_LIST)
        if self.webhook:
            modes.append(FilterMode.WEBHOOK)
        return modes

    @property
    def mode(self) -> FilterMode:
        """The mode that applies after precedence is taken into account."""
        modes = self.populated_modes()
        return modes[0] if modes else FilterMode.ALL

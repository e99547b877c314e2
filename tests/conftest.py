from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from kschema.core.cluster import Cluster  # noqa: E402


class FakeRowStream:
    def __init__(self, items, error: Exception | None = None):
        self.items = list(items)
        self.error = error
        self.closed = False

    def __iter__(self):
        yield from self.items
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


class FakeQueryClient:
    """Query client returning the configured rows for every management command."""

    def __init__(self, names=(), items=None, error: Exception | None = None):
        self.items = list(items) if items is not None else [(n,) for n in names]
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.streams: list[FakeRowStream] = []
        self.closed = False

    def mgmt(self, database: str, statement: str) -> FakeRowStream:
        self.calls.append((database, statement))
        stream = FakeRowStream(self.items, self.error)
        self.streams.append(stream)
        return stream

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_cluster():
    """Factory for clusters backed by a FakeQueryClient."""

    def _make(
        names=(),
        *,
        items=None,
        error: Exception | None = None,
        uri: str = "https://fabrikam.westeurope.kusto.windows.net",
    ) -> Cluster:
        client = FakeQueryClient(names, items=items, error=error)
        return Cluster(uri=uri, client=client, log=logging.getLogger("kschema.test"))

    return _make

from __future__ import annotations

from typing import Iterator

from azure.kusto.data import KustoClient
from azure.kusto.data.exceptions import KustoError

from kschema.core.errors import QueryError
from kschema.core.query import InlineError, RowItem


class KustoRowStream:
    """Row stream over the primary result table of a Kusto management command."""

    def __init__(self, client: KustoClient, database: str, statement: str) -> None:
        self._client = client
        self._database = database or None
        self._statement = statement
        self._response = None
        self._closed = False

    def __iter__(self) -> Iterator[RowItem]:
        if self._closed:
            raise QueryError("Row stream is already closed.")
        try:
            self._response = self._client.execute_mgmt(self._database, self._statement)
        except KustoError as exc:
            raise QueryError(f"Management command failed: {exc}") from exc

        for table in self._response.primary_results[:1]:
            for row in table:
                yield row.to_list()

        if self._response.errors_count:
            for exc in self._response.get_exceptions():
                yield InlineError(str(exc))

    def close(self) -> None:
        """Drop the buffered response."""
        self._response = None
        self._closed = True


class KustoQueryAdapter:
    """Adapter around azure-kusto-data management commands."""

    def __init__(self, client: KustoClient) -> None:
        self.client = client

    def mgmt(self, database: str, statement: str) -> KustoRowStream:
        """Return a row stream for a management command (runs lazily on iteration)."""
        return KustoRowStream(self.client, database, statement)

    def close(self) -> None:
        """Close the Kusto client."""
        self.client.close()

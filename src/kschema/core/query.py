"""Query capability consumed by the core.

The core never talks to the Azure SDK directly: it depends on the narrow
QueryClient / RowStream interfaces below. Implementations translate terminal
transport failures into QueryError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence, Union


@dataclass(frozen=True)
class InlineError:
    """A per-row error reported inside an otherwise healthy result stream."""

    message: str


RowItem = Union[Sequence[object], InlineError]


class RowStream(Protocol):
    """Iterator over management command results that must be closed."""

    def __iter__(self) -> Iterator[RowItem]:
        """Yield rows (first column first) or InlineError values.

        Raises QueryError when the stream fails terminally.
        """
        ...

    def close(self) -> None:
        """Release the underlying server-side resources."""
        ...


class QueryClient(Protocol):
    """Interface for issuing management commands against a cluster."""

    def mgmt(self, database: str, statement: str) -> RowStream:
        """Run a management command and return its row stream."""
        ...

    def close(self) -> None:
        """Release the client."""
        ...

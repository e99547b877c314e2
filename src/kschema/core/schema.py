"""Schema definitions and their on-disk storage.

A schema definition is opaque text (KQL by default). Before it can be handed
to the apply engine it is written to a file; downstream stages only ever
reference that file, they never copy the text again.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from kschema.core.errors import BuildError, StorageError

DEFAULT_DIALECT = "kql"


@dataclass(frozen=True)
class SchemaDefinition:
    """
    Desired schema state.

    Attributes:
        text: Schema script, not interpreted by kschema.
        dialect: Dialect tag, also used as the stored file extension.
    """

    text: str
    dialect: str = DEFAULT_DIALECT

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, str], key: str = DEFAULT_DIALECT
    ) -> SchemaDefinition:
        """Read the schema from a config-map style mapping (e.g. its `kql` entry)."""
        text = data.get(key)
        if text is None:
            raise BuildError(f"no {key} found in configuration data")
        return cls(text=text, dialect=key)

    @classmethod
    def from_file(cls, path: Path, dialect: str | None = None) -> SchemaDefinition:
        """Read the schema from a file; the dialect defaults to the file extension."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read schema file {path}: {exc}") from exc
        return cls(text=text, dialect=dialect or path.suffix.lstrip(".") or DEFAULT_DIALECT)


class SchemaFileStore:
    """Writes schema definitions to uniquely named files under a root directory."""

    def __init__(self, root: Path, *, log: logging.Logger | None = None) -> None:
        self.root = Path(root)
        self.log = log or logging.getLogger(__name__)

    def store(self, schema: SchemaDefinition) -> Path:
        """
        Persist a schema definition and return the path of the new file.

        Every call creates a new file, even for identical input; callers keep
        the returned path instead of deriving it again.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix="schema-", suffix=f".{schema.dialect}", dir=self.root
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(schema.text)
        except OSError as exc:
            self.log.error("failed storing schema under %s", self.root, exc_info=True)
            raise StorageError(f"Could not store schema under {self.root}: {exc}") from exc

        path = Path(name)
        self.log.debug("stored %s schema at %s", schema.dialect, path)
        return path

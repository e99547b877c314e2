"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from kschema.cli.common.output import out
from kschema.core.errors import ClusterUriError, InvalidFilterError, KSchemaError

# Usage errors exit 2 like typer's own parameter errors; runtime failures exit 1.
USAGE_ERROR = 2
RUNTIME_ERROR = 1


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = RUNTIME_ERROR) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_code_for(exc: KSchemaError) -> int:
    """Return the process exit code for a kschema error."""
    if isinstance(exc, (InvalidFilterError, ClusterUriError)):
        return USAGE_ERROR
    return RUNTIME_ERROR


def exit_from_error(exc: KSchemaError, *, message: str | None = None) -> NoReturn:
    """Print a kschema error (or a custom message) and exit with its code."""
    out.error(message or str(exc))
    raise typer.Exit(exit_code_for(exc)) from exc

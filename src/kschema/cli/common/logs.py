"""Logging configuration for the CLI.

Diagnostics go through the standard `logging` module under the `kschema`
logger and are rendered on stderr by rich, so they do not mix with the
tables printed on stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "kschema"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configure the `kschema` logger hierarchy and return its root logger.

    Calling it again replaces the previously installed handler.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO", "WARNING").
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False
    return logger

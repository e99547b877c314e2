"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from kschema.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_SELECT,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)

_STATUS_STYLES = {"SUCCESS": "ok", "SKIPPED": "warn", "FAILED": "err"}


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts with the tool name."""
        return f"[kschema] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def select_many(
        self, message: str, choices: list[Any], *, checked: bool = True
    ) -> list[Any]:
        """
        Prompt the user to select multiple items from a list.

        Choices may be plain strings or questionary.Choice objects. Plain
        strings start checked unless `checked` is False.
        """
        if not choices:
            return []

        choices = [
            questionary.Choice(title=c, value=c, checked=checked)
            if isinstance(c, str)
            else c
            for c in choices
        ]
        prompt = self._q_try(
            questionary.checkbox,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
            pointer="❯",
            checked_icon="▣",
            unchecked_icon="▢",
        )
        picked = prompt.ask()
        return list(picked or [])

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def databases_table(
        self, cluster_uri: str, databases: Iterable[str], title: str = "Databases"
    ) -> None:
        """Render the database names of one cluster."""
        t = Table(title=f"{title} ({cluster_uri})", show_lines=False)
        t.add_column("#", style="meta", no_wrap=True)
        t.add_column("Database", style="ok")

        for i, name in enumerate(databases, start=1):
            t.add_row(str(i), name)

        console.print(t)

    def targets_table(self, targets: Iterable[Any], title: str = "Targets") -> None:
        """
        Expects objects with .cluster_uri .mode .databases
        (like kschema.core.targets.ClusterTargets)
        """
        t = Table(title=title, show_lines=True)
        t.add_column("Cluster", style="ok", no_wrap=True)
        t.add_column("Mode", style="meta")
        t.add_column("Count", justify="right")
        t.add_column("Databases")

        for tg in targets:
            mode = tg.mode.value if hasattr(tg.mode, "value") else str(tg.mode)
            t.add_row(
                tg.cluster_uri,
                mode,
                str(len(tg.databases)),
                ", ".join(tg.databases) or "[warn](none)[/]",
            )

        console.print(t)

    def rollout_results_table(
        self, results: Iterable[Any], title: str = "Rollout results"
    ) -> None:
        """
        Expects objects with .cluster_uri .status .databases .job_file .error
        (like kschema.core.rollout.RolloutResult)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Cluster", style="ok", no_wrap=True)
        t.add_column("Databases", justify="right")
        t.add_column("Status")
        t.add_column("Job file", style="meta")
        t.add_column("Error", style="err")

        for r in results:
            status = r.status.value if hasattr(r.status, "value") else str(r.status)
            style = _STATUS_STYLES.get(status, "meta")
            t.add_row(
                r.cluster_uri,
                str(len(r.databases)),
                f"[{style}]{status}[/{style}]",
                str(r.job_file or ""),
                str(r.error or ""),
            )

        console.print(t)

    def schema_groups_table(self, groups: list[str], title: str = "Schema groups") -> None:
        """Render schema registry group names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Group", style="ok")

        for g in groups:
            t.add_row(str(g))

        console.print(t)


out = Out()

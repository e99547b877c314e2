"""CLI application for Kusto schema rollouts."""

import typer

from kschema.cli.commands.databases import app as databases_app
from kschema.cli.commands.registry import app as registry_app
from kschema.cli.commands.schema import app as schema_app
from kschema.cli.commands.targets import app as targets_app
from kschema.cli.common.context import build_context
from kschema.cli.common.exits import die
from kschema.cli.common.logs import configure_logging

app = typer.Typer(
    help="kschema - schema rollouts for Kusto cluster fleets",
    no_args_is_help=True,
)

app.add_typer(databases_app, name="databases")
app.add_typer(targets_app, name="targets")
app.add_typer(schema_app, name="schema")
app.add_typer(registry_app, name="registry")


@app.callback()
def _init(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Diagnostics level (DEBUG, INFO, WARNING, ERROR); env KSCHEMA_LOG_LEVEL",
    ),
):
    """Initialize settings, logging and the shared context."""
    appctx = build_context()
    try:
        configure_logging(log_level or appctx.settings.log_level)
    except ValueError as e:
        die(str(e), code=2)
    ctx.obj = appctx
    ctx.call_on_close(appctx.close)


if __name__ == "__main__":
    app()

"""Commands for inspecting cluster databases."""

import typer

from kschema.cli.common.context import AppContext, connect_clusters
from kschema.cli.common.exits import exit_from_error
from kschema.cli.common.options import ClusterOpt
from kschema.cli.common.output import out
from kschema.core.catalog import compile_name_pattern, list_databases
from kschema.core.errors import KSchemaError

app = typer.Typer(help="Inspect the databases of Kusto clusters", no_args_is_help=True)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    cluster: list[str] = ClusterOpt,
    name: str = typer.Option("", "--name", help="Regex on database name"),
):
    """
    List the databases of one or more clusters.
    """
    appctx: AppContext = ctx.obj

    try:
        compile_name_pattern(name)
    except KSchemaError as exc:
        exit_from_error(exc)

    for c in connect_clusters(appctx, cluster):
        try:
            with out.status(f"Listing databases on {c.name}..."):
                names = list_databases(c, name) if name else c.databases()
        except KSchemaError as exc:
            exit_from_error(exc)

        if not names:
            out.warn(f"No databases matched on {c.uri}")
            continue
        out.databases_table(c.uri, names)

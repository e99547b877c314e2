"""Common CLI options for the CLI."""

import typer

ClusterOpt = typer.Option(
    ...,
    "--cluster",
    "-c",
    help="Cluster URI (https://<name>.<region>.kusto.windows.net). This is reusable.",
    show_default=False,
)

DbOpt = typer.Option(
    None,
    "--db",
    help="Regex on database name (takes precedence over --dbs and --webhook)",
)

DbsOpt = typer.Option(
    [],
    "--dbs",
    help="Explicit database name, used as-is. This is reusable.",
    show_default=False,
)

WebhookOpt = typer.Option(
    None,
    "--webhook",
    help="Target lookup service URL (called with cluster name and --label)",
)

LabelOpt = typer.Option(
    None,
    "--label",
    help="Label sent to the --webhook lookup service",
)

AllOpt = typer.Option(
    False,
    "--all",
    help="Explicitly target every database when no filter is given",
)

SchemaFileOpt = typer.Option(
    ...,
    "--schema-file",
    "-f",
    help="Schema definition file (KQL)",
    exists=True,
    dir_okay=False,
    readable=True,
)

FailIfDataLossOpt = typer.Option(
    False,
    "--fail-if-data-loss/--allow-data-loss",
    help="Make the apply engine refuse changes that drop data",
)

SelectOpt = typer.Option(
    False,
    "--select",
    "-s",
    help="Interactively pick target databases per cluster",
)

ParallelOpt = typer.Option(
    4,
    "--parallel",
    "-n",
    help="Number of clusters to apply to in parallel",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before applying the schema",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Generate job files, but don't apply anything",
)

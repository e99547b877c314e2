"""Commands for resolving schema change targets."""

import typer

from kschema.cli.common.context import AppContext, connect_clusters
from kschema.cli.common.exits import exit_from_error
from kschema.cli.common.filter_builder import build_filter
from kschema.cli.common.options import (
    ClusterOpt,
    DbOpt,
    DbsOpt,
    LabelOpt,
    WebhookOpt,
)
from kschema.cli.common.output import out
from kschema.core.errors import KSchemaError
from kschema.core.filters import FilterMode
from kschema.core.rollout import resolve_all

app = typer.Typer(help="Resolve which databases a schema change targets", no_args_is_help=True)


@app.command()
def resolve(
    ctx: typer.Context,
    cluster: list[str] = ClusterOpt,
    db: str | None = DbOpt,
    dbs: list[str] = DbsOpt,
    webhook: str | None = WebhookOpt,
    label: str | None = LabelOpt,
):
    """
    Show the target databases a filter resolves to, without changing anything.
    """
    appctx: AppContext = ctx.obj

    try:
        target_filter = build_filter(db=db, dbs=dbs, webhook=webhook, label=label)
    except KSchemaError as exc:
        exit_from_error(exc)

    if target_filter.mode == FilterMode.ALL:
        out.warn("No filter given: every database of each cluster is selected.")

    clusters = connect_clusters(appctx, cluster)
    try:
        with out.status("Resolving targets..."):
            plans = resolve_all(clusters, target_filter, appctx.provider())
    except KSchemaError as exc:
        exit_from_error(exc)

    out.targets_table(plans, title="Resolved targets")

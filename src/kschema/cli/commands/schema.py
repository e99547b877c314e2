"""Commands for applying schema definitions to Kusto clusters."""

from pathlib import Path

import typer

from kschema.cli.common.context import AppContext, connect_clusters
from kschema.cli.common.exits import die, exit_from_error, ok_exit, warn_exit
from kschema.cli.common.filter_builder import build_filter
from kschema.cli.common.options import (
    AllOpt,
    ClusterOpt,
    ConfirmOpt,
    DbOpt,
    DbsOpt,
    DryRunOpt,
    FailIfDataLossOpt,
    LabelOpt,
    ParallelOpt,
    SchemaFileOpt,
    SelectOpt,
    WebhookOpt,
)
from kschema.cli.common.output import out
from kschema.cli.tui import select_targets
from kschema.core.errors import KSchemaError
from kschema.core.filters import FilterMode
from kschema.core.rollout import RolloutStatus, apply_rollouts, resolve_all
from kschema.core.schema import SchemaDefinition

app = typer.Typer(help="Apply schema definitions to Kusto clusters", no_args_is_help=True)


@app.command()
def apply(
    ctx: typer.Context,
    cluster: list[str] = ClusterOpt,
    schema_file: Path = SchemaFileOpt,
    db: str | None = DbOpt,
    dbs: list[str] = DbsOpt,
    webhook: str | None = WebhookOpt,
    label: str | None = LabelOpt,
    select_all: bool = AllOpt,
    fail_if_data_loss: bool = FailIfDataLossOpt,
    select: bool = SelectOpt,
    parallel: int = ParallelOpt,
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Resolve targets, generate delta-kusto jobs and apply them.
    """
    appctx: AppContext = ctx.obj

    if parallel < 1:
        die("--parallel must be >= 1", code=2)

    try:
        target_filter = build_filter(
            db=db, dbs=dbs, webhook=webhook, label=label, select_all=select_all
        )
        schema = SchemaDefinition.from_file(schema_file)
    except KSchemaError as exc:
        exit_from_error(exc)

    if target_filter.mode == FilterMode.ALL and not select_all:
        if not confirm:
            die("No filter given. Pass --all to target every database.", code=2)
        out.warn("No filter given: every database of each cluster will be targeted.")
        if not out.confirm("Target every database?"):
            ok_exit("Cancelled")

    clusters = connect_clusters(appctx, cluster)
    try:
        with out.status("Resolving targets..."):
            plans = resolve_all(clusters, target_filter, appctx.provider())
    except KSchemaError as exc:
        exit_from_error(exc)

    if select:
        plans = [select_targets(p) for p in plans]

    empty = [p.cluster_uri for p in plans if not p.databases]
    for uri in empty:
        out.warn(f"No target databases on {uri}; skipping")
    plans = [p for p in plans if p.databases]
    if not plans:
        warn_exit("No target databases", code=0)

    out.header("Schema rollout")
    out.kv(
        {
            "schema": str(schema_file),
            "fail if data loss": fail_if_data_loss,
            "dry run": dry_run,
        }
    )
    out.targets_table(plans, title="Targets")

    total = sum(len(p.databases) for p in plans)
    if not dry_run and confirm and not out.confirm(
        f"Apply schema to {total} database(s) on {len(plans)} cluster(s)?"
    ):
        ok_exit("Cancelled")

    try:
        stored = appctx.store().store(schema)
    except KSchemaError as exc:
        exit_from_error(exc)

    with out.status("Generating jobs..." if dry_run else "Applying schema..."):
        results = apply_rollouts(
            plans,
            stored,
            generator=appctx.generator(),
            applier=appctx.runner(),
            fail_if_data_loss=fail_if_data_loss,
            max_parallel=parallel,
            dry_run=dry_run,
        )

    out.rollout_results_table(results)

    if dry_run:
        warn_exit("Dry-run enabled: job files generated, nothing applied", code=0)

    failed = [r for r in results if r.status == RolloutStatus.FAILED]
    if failed:
        die(f"Schema apply failed on {len(failed)} cluster(s)", code=1)
    out.success(f"Schema applied on {len(results)} cluster(s)")

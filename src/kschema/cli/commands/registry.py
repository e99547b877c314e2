"""Commands for the Event Hubs schema registry."""

import typer
from azure.identity import DefaultAzureCredential

from kschema.cli.common.context import AppContext
from kschema.cli.common.exits import exit_from_error, warn_exit
from kschema.cli.common.output import out
from kschema.core.adapters.schemaregistry import SchemaRegistryClient
from kschema.core.errors import KSchemaError

app = typer.Typer(help="Read the Event Hubs schema registry", no_args_is_help=True)


@app.command()
def groups(
    ctx: typer.Context,
    endpoint: str = typer.Option(
        ..., "--endpoint", "-e", help="Namespace host, e.g. myns.servicebus.windows.net"
    ),
    anonymous: bool = typer.Option(
        False, "--anonymous", help="Send requests without an Azure AD token"
    ),
):
    """
    List the schema groups visible to the current principal.
    """
    appctx: AppContext = ctx.obj
    credential = None if anonymous else DefaultAzureCredential()
    client = SchemaRegistryClient(
        endpoint,
        credential=credential,
        retries=appctx.settings.registry_retries,
    )

    try:
        with out.status("Loading schema groups..."):
            names = client.list_schema_groups()
    except KSchemaError as exc:
        exit_from_error(exc)

    if not names:
        warn_exit("No schema groups found", code=0)
    out.schema_groups_table(names)

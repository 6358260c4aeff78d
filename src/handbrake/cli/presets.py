"""CLI commands that query HandBrakeCLI itself."""

import json

import click

from handbrake.cli.exit_codes import ExitCode
from handbrake.cli.output import reporting_errors
from handbrake.executor import HandBrakeCLI
from handbrake.introspector import format_presets_human


@click.command("presets")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def presets_command(ctx: click.Context, output_format: str) -> None:
    """List the presets built into HandBrakeCLI."""
    cli: HandBrakeCLI = ctx.obj["cli"]

    with reporting_errors(json_output=output_format == "json"):
        presets = cli.preset_list()

    if output_format == "json":
        click.echo(json.dumps(presets, indent=2))
    elif presets:
        click.echo(format_presets_human(presets))
    else:
        click.echo("No presets reported by HandBrakeCLI.")


@click.command("check-update")
@click.pass_context
def check_update_command(ctx: click.Context) -> None:
    """Check whether HandBrakeCLI is the current version.

    Exits with status 60 when an update is available. HandBrakeCLI reports
    itself up to date when it cannot reach the update server.
    """
    cli: HandBrakeCLI = ctx.obj["cli"]

    with reporting_errors():
        up_to_date = cli.update()

    if up_to_date:
        click.echo("HandBrakeCLI is up to date.")
    else:
        click.echo("A newer version of HandBrakeCLI is available.")
        ctx.exit(ExitCode.WARNINGS)

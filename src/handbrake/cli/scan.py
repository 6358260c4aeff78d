"""CLI scan command for handbrake-py."""

import logging
from pathlib import Path

import click

from handbrake.cli.exit_codes import ExitCode
from handbrake.cli.output import error_exit, reporting_errors
from handbrake.executor import HandBrakeCLI
from handbrake.introspector import format_human, format_json, format_yaml

logger = logging.getLogger(__name__)

_FORMATTERS = {
    "human": format_human,
    "json": format_json,
    "yaml": format_yaml,
}


@click.command("scan")
@click.argument("source", type=click.Path(path_type=Path))
@click.option(
    "--title",
    "-t",
    type=click.IntRange(min=0),
    default=None,
    help="Scan only this title (default: all titles).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json", "yaml"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def scan_command(
    ctx: click.Context,
    source: Path,
    title: int | None,
    output_format: str,
) -> None:
    """Scan a disc, disc image or video file and list its titles.

    SOURCE is a device, a DVD/Blu-ray folder or image, or a video file.
    """
    if not source.exists():
        error_exit(f"Source not found: {source}", ExitCode.TARGET_NOT_FOUND)

    cli: HandBrakeCLI = ctx.obj["cli"]
    command = cli.with_("input", source)
    if title is not None:
        command = command.with_("title", title)

    with reporting_errors(json_output=output_format == "json"):
        disc = command.scan()

    logger.info("Scanned %s: %d title(s)", source, len(disc.titles))
    click.echo(_FORMATTERS[output_format](disc))

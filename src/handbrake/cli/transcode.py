"""CLI transcode command for handbrake-py."""

import dataclasses
import logging
from pathlib import Path

import click

from handbrake.cli.exit_codes import ExitCode
from handbrake.cli.output import error_exit, reporting_errors
from handbrake.config import HandBrakeConfig, apply_profile, load_profile
from handbrake.executor import HandBrakeCLI, OutputOutcome, OutputResult

logger = logging.getLogger(__name__)


def parse_option(text: str) -> tuple[str, tuple[str, ...]]:
    """Split a --option value into a switch identifier and its values.

    "markers" gives a bare switch; "quality=20" gives one value. Everything
    after the first "=" is a single value, so "audio=1,2" passes "1,2".

    Raises:
        click.BadParameter: If the identifier is empty.
    """
    identifier, sep, value = text.partition("=")
    identifier = identifier.strip()
    if not identifier:
        raise click.BadParameter(f"expected KEY or KEY=VALUE, got {text!r}")
    return identifier, (value,) if sep else ()


def _describe_result(result: OutputResult) -> str:
    if result.outcome is OutputOutcome.SKIPPED:
        return f"Skipped: {result.final_path} already exists"
    if result.outcome is OutputOutcome.LEFT_IN_PLACE:
        return (
            f"{result.final_path} appeared during the transcode; "
            f"output left at {result.working_path}"
        )
    return f"Wrote {result.final_path}"


@click.command("transcode")
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("output", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--title",
    "-t",
    type=click.IntRange(min=1),
    default=None,
    help="Title to transcode (HandBrakeCLI default: 1).",
)
@click.option("--preset", "-Z", default=None, help="HandBrakeCLI preset name.")
@click.option(
    "--profile",
    "-p",
    "profile_name",
    default=None,
    help="Profile from ~/.handbrake-py/profiles/ to apply.",
)
@click.option(
    "--option",
    "-o",
    "options",
    multiple=True,
    metavar="KEY[=VALUE]",
    help="Extra HandBrakeCLI switch, e.g. -o quality=20 -o markers. Repeatable.",
)
@click.option(
    "--overwrite",
    type=click.Choice(["replace", "reject", "skip"], case_sensitive=False),
    default=None,
    help="What to do if OUTPUT exists (default from config: replace).",
)
@click.option(
    "--atomic/--no-atomic",
    default=None,
    help="Transcode to a working file and move it into place on success.",
)
@click.option(
    "--temp-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory for the working file. Implies --atomic.",
)
@click.pass_context
def transcode_command(
    ctx: click.Context,
    source: Path,
    output: Path,
    title: int | None,
    preset: str | None,
    profile_name: str | None,
    options: tuple[str, ...],
    overwrite: str | None,
    atomic: bool | None,
    temp_dir: Path | None,
) -> None:
    """Transcode SOURCE to OUTPUT.

    Switches are applied in this order: --title, --preset, the profile's
    options, then each --option in the order given.

    Examples:

        handbrake-py transcode /dev/disk2 movie.m4v -t 3 -Z "Fast 1080p30"

        handbrake-py transcode VIDEO_TS tablet.mp4 -p tablet --overwrite skip
    """
    if not source.exists():
        error_exit(f"Source not found: {source}", ExitCode.TARGET_NOT_FOUND)

    parsed_options = []
    for text in options:
        try:
            parsed_options.append(parse_option(text))
        except click.BadParameter as e:
            raise click.BadParameter(e.message, param_hint="'--option'") from e

    config: HandBrakeConfig = ctx.obj["config"]
    output_config = config.output
    overrides = {
        "overwrite": overwrite,
        "atomic": True if temp_dir is not None and atomic is None else atomic,
        "temp_directory": temp_dir,
    }
    output_config = dataclasses.replace(
        output_config, **{k: v for k, v in overrides.items() if v is not None}
    )

    cli: HandBrakeCLI = ctx.obj["cli"]

    with reporting_errors():
        command = cli.with_("input", source)
        if title is not None:
            command = command.with_("title", title)
        if preset is not None:
            command = command.with_("preset", preset)
        if profile_name is not None:
            profile = load_profile(profile_name)
            command = command.with_command(apply_profile(command.command, profile))
        for identifier, values in parsed_options:
            command = command.with_(identifier, *values)

        logger.debug("Transcode arguments: %s", command.arguments)
        result = command.output(
            output,
            overwrite=output_config.overwrite_policy(),
            atomic=output_config.atomic_policy(),
        )

    click.echo(_describe_result(result))
    if result.outcome is OutputOutcome.LEFT_IN_PLACE:
        ctx.exit(ExitCode.WARNINGS)

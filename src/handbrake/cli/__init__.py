"""CLI module for handbrake-py."""

import logging
from pathlib import Path

import click

from handbrake.cli.exit_codes import ExitCode
from handbrake.cli.output import error_exit
from handbrake.config import HandBrakeConfig, configure_logging_from_cli, get_config
from handbrake.errors import ConfigError
from handbrake.executor import HandBrakeCLI

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    config: HandBrakeConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from config and CLI options, once per process.

    Args:
        config: Loaded configuration supplying the base logging settings.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    try:
        configure_logging_from_cli(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        error_exit(f"Invalid logging configuration: {e}", ExitCode.CONFIG_ERROR)
    _logging_configured = True


@click.group()
@click.version_option(package_name="handbrake-py")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.handbrake-py/config.toml).",
)
@click.option(
    "--bin-path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="HandBrakeCLI executable (default: HandBrakeCLI on PATH).",
)
@click.option(
    "--trace/--no-trace",
    default=None,
    help="Log HandBrakeCLI output as it runs.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    bin_path: Path | None,
    trace: bool | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """handbrake-py - Scan discs and transcode video with HandBrakeCLI."""
    ctx.ensure_object(dict)

    try:
        config = get_config(
            config_path=config_path,
            handbrake_cli=bin_path,
            trace=trace,
            strict=config_path is not None,
        )
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    _configure_logging(config, log_level, log_file, log_json)

    ctx.obj["config"] = config
    # Preserve an invoker passed in by tests
    if "cli" not in ctx.obj:
        ctx.obj["cli"] = HandBrakeCLI.from_config(config)


# Defer import to avoid circular dependency
def _register_commands():
    from handbrake.cli.presets import check_update_command, presets_command
    from handbrake.cli.profiles import profiles_command
    from handbrake.cli.scan import scan_command
    from handbrake.cli.transcode import transcode_command

    main.add_command(scan_command)
    main.add_command(transcode_command)
    main.add_command(presets_command)
    main.add_command(check_update_command)
    main.add_command(profiles_command)


_register_commands()

"""Shared error reporting for CLI commands.

Commands wrap their work in reporting_errors() so that every library error
ends the process with a message on stderr and a specific ExitCode.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click

from handbrake.cli.exit_codes import ExitCode
from handbrake.config.profiles import ProfileNotFoundError
from handbrake.errors import (
    ConfigError,
    HandBrakeError,
    OutputMissingError,
    ProcessFailedError,
    ProcessTimeoutError,
    TargetExistsError,
    ToolNotFoundError,
    UnrecognizedFormatError,
)

logger = logging.getLogger(__name__)


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Exit with a formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format the message as JSON.
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {"code": code_name, "message": message},
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)


def exit_code_for(error: BaseException) -> ExitCode:
    """Map a library or OS error to the ExitCode a command should return."""
    if isinstance(error, ProfileNotFoundError):
        return ExitCode.PROFILE_NOT_FOUND
    if isinstance(error, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, TargetExistsError):
        return ExitCode.TARGET_EXISTS
    if isinstance(error, (ProcessFailedError, OutputMissingError)):
        return ExitCode.OPERATION_FAILED
    if isinstance(error, ProcessTimeoutError):
        return ExitCode.OPERATION_TIMEOUT
    if isinstance(error, UnrecognizedFormatError):
        return ExitCode.PARSE_ERROR
    if isinstance(error, ToolNotFoundError):
        return ExitCode.TOOL_NOT_AVAILABLE
    return ExitCode.GENERAL_ERROR


def describe_error(error: BaseException) -> str:
    """Return a one-line description of error for the terminal."""
    if isinstance(error, ProcessFailedError):
        return f"HandBrakeCLI exited with status {error.exit_code}"
    if isinstance(error, FileNotFoundError) and error.filename:
        return f"Not found: {error.filename}"
    return str(error)


@contextmanager
def reporting_errors(json_output: bool = False) -> Iterator[None]:
    """Turn library errors raised inside the block into error_exit() calls."""
    try:
        yield
    except (HandBrakeError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        error_exit(describe_error(e), exit_code_for(e), json_output)

"""Exception types raised by the HandBrakeCLI wrapper.

All errors derive from HandBrakeError so callers can catch everything the
library raises with a single except clause:

- ProcessFailedError: HandBrakeCLI exited with a nonzero status
- ProcessTimeoutError: HandBrakeCLI did not exit within the configured timeout
- ToolNotFoundError: the HandBrakeCLI executable does not exist
- OutputMissingError: HandBrakeCLI succeeded but wrote no output file
- TargetExistsError: the output file exists and the overwrite policy rejects it
- UnrecognizedFormatError: scan output is missing an expected field
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class HandBrakeError(Exception):
    """Base class for all errors raised by this package."""


class ProcessFailedError(HandBrakeError):
    """Raised when HandBrakeCLI exits with a nonzero status.

    Invalid switches are not validated locally; they surface here, with the
    captured output attached so the caller can see what the tool complained
    about.
    """

    def __init__(
        self,
        exit_code: int,
        arguments: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.exit_code = exit_code
        self.arguments = list(arguments)
        self.output = output
        super().__init__(f"HandBrakeCLI execution failed (exit code {exit_code})")


class ProcessTimeoutError(HandBrakeError):
    """Raised when HandBrakeCLI is still running after the timeout.

    The process has been killed by the time this is raised. output holds
    whatever HandBrakeCLI printed before it was stopped.
    """

    def __init__(
        self,
        timeout: float,
        arguments: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.timeout = timeout
        self.arguments = list(arguments)
        self.output = output
        super().__init__(f"HandBrakeCLI did not exit within {timeout}s")


class ToolNotFoundError(HandBrakeError):
    """Raised when the HandBrakeCLI executable cannot be found."""

    def __init__(self, bin_path: str) -> None:
        self.bin_path = bin_path
        super().__init__(f"HandBrakeCLI executable not found: {bin_path}")


class OutputMissingError(HandBrakeError):
    """Raised when HandBrakeCLI exits 0 without writing its output file.

    HandBrakeCLI does this when, for example, the requested title does not
    exist on the source.
    """

    def __init__(self, path: Path | str, output: str = "") -> None:
        self.path = Path(path)
        self.output = output
        super().__init__(f"HandBrakeCLI did not write {self.path}")


class TargetExistsError(HandBrakeError, FileExistsError):
    """Raised when an output file exists and overwriting is rejected."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Output file already exists: {self.path}")


class UnrecognizedFormatError(HandBrakeError):
    """Raised when scan output lacks a field the extractor requires.

    This almost always means the installed HandBrakeCLI prints its scan in a
    layout this library does not understand.
    """

    def __init__(self, field: str, node_text: str) -> None:
        self.field = field
        self.node_text = node_text
        super().__init__(f"Could not find {field} in scan output: {node_text!r}")


class ConfigError(HandBrakeError):
    """Raised when configuration values are invalid."""

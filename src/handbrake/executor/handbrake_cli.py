"""HandBrakeCLI invoker.

HandBrakeCLI is the main entry point of this package. It pairs an immutable
CommandBuilder with the executable path and a ProcessRunner, and exposes the
operations HandBrakeCLI supports: scanning, transcoding to an output file,
checking for updates and listing presets.

Like CommandBuilder, every HandBrakeCLI is immutable. with_() returns a new
instance sharing the executable, trace flag and runner:

    cli = HandBrakeCLI()
    dvd = cli.with_("input", "/dev/disk2")
    disc = dvd.scan()
    movie = dvd.with_("title", disc.main_feature.number)
    movie.with_("preset", "Fast 1080p30").output("movie.m4v")
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from handbrake.core.datetime_utils import format_seconds
from handbrake.domain.models import Disc
from handbrake.errors import (
    OutputMissingError,
    ProcessFailedError,
    ToolNotFoundError,
)
from handbrake.executor.command import CommandBuilder
from handbrake.executor.interface import ProcessRunner, RunnerResult
from handbrake.executor.output import (
    AtomicPolicy,
    OutputResult,
    OverwritePolicy,
    finalize_output,
)
from handbrake.executor.runner import SubprocessRunner
from handbrake.introspector.parsers import parse_scan
from handbrake.logging.context import job_context

if TYPE_CHECKING:
    from handbrake.config.models import HandBrakeConfig

logger = logging.getLogger(__name__)

DEFAULT_BIN_PATH = "HandBrakeCLI"

UP_TO_DATE_RE = re.compile(r"Your version of HandBrake is up to date\.", re.IGNORECASE)
PRESET_CATEGORY_RE = re.compile(r"< (.*?)\n(.*?)>", re.DOTALL)
PRESET_ENTRY_RE = re.compile(r"\+(.*?):(.*?)\n")


class HandBrakeCLI:
    """Immutable HandBrakeCLI command with the means to run it."""

    def __init__(
        self,
        bin_path: str | Path | None = None,
        trace: bool = False,
        runner: ProcessRunner | None = None,
        command: CommandBuilder | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            bin_path: Path to the HandBrakeCLI executable. Defaults to
                "HandBrakeCLI", looked up on PATH.
            trace: Stream HandBrakeCLI output to the log while it runs.
                When off, output is only logged if the run fails.
            runner: ProcessRunner used to execute commands. Defaults to a
                SubprocessRunner. You shouldn't usually need to replace this.
            command: Initial switches (defaults to none).
        """
        self.bin_path = str(bin_path) if bin_path else DEFAULT_BIN_PATH
        self.trace = trace
        self._runner = runner if runner is not None else SubprocessRunner(trace=trace)
        self._command = command if command is not None else CommandBuilder()

    @classmethod
    def from_config(
        cls,
        config: HandBrakeConfig,
        runner: ProcessRunner | None = None,
    ) -> HandBrakeCLI:
        """Create an invoker from loaded configuration.

        Args:
            config: Configuration from handbrake.config.get_config().
            runner: Optional runner override.
        """
        if runner is None:
            runner = SubprocessRunner(
                trace=config.execution.trace, timeout=config.execution.timeout
            )
        return cls(
            bin_path=config.tools.handbrake_cli,
            trace=config.execution.trace,
            runner=runner,
        )

    @property
    def command(self) -> CommandBuilder:
        """The switches configured so far."""
        return self._command

    @property
    def arguments(self) -> list[str]:
        """The switches flattened into an argument list (without bin_path)."""
        return self._command.to_argument_vector()

    def with_(self, identifier: str, *args: object) -> HandBrakeCLI:
        """Return a copy of this invoker with another switch appended.

        This does no validation of the switch name; if it is invalid,
        HandBrakeCLI fails when the command is finally run.

        Args:
            identifier: Switch identifier (e.g., "native_language").
            *args: Values for the switch.
        """
        return self.with_command(self._command.with_(identifier, *args))

    def with_command(self, command: CommandBuilder) -> HandBrakeCLI:
        """Return a copy of this invoker using a different CommandBuilder."""
        return HandBrakeCLI(
            bin_path=self.bin_path,
            trace=self.trace,
            runner=self._runner,
            command=command,
        )

    def scan(self) -> Disc:
        """Perform a title scan.

        Unlike HandBrakeCLI, if no title has been specified this scans all
        titles (HandBrakeCLI on its own only reports title 1). The receiver
        is not modified.

        Returns:
            Disc describing the scanned titles.

        Raises:
            ProcessFailedError: If HandBrakeCLI fails.
            UnrecognizedFormatError: If the scan output cannot be parsed.
        """
        if not self._command.contains_switch("title"):
            return self.with_("title", 0).scan()
        with job_context(_new_job_id()):
            result = self._run("--scan")
            return parse_scan(result.output)

    def output(
        self,
        filename: str | Path,
        overwrite: OverwritePolicy = OverwritePolicy.REPLACE,
        atomic: AtomicPolicy | None = None,
    ) -> OutputResult:
        """Perform a transcode to filename.

        This starts the transcode immediately; set all other switches first.

        Args:
            filename: Desired name of the final output file.
            overwrite: What to do if filename already exists. REPLACE
                overwrites it, REJECT raises TargetExistsError, SKIP does not
                run HandBrakeCLI at all.
            atomic: Where to write while transcoding. With a temporary
                working file the overwrite policy is applied to filename both
                before and after the transcode. Defaults to writing directly.

        Returns:
            OutputResult describing what happened.

        Raises:
            ProcessFailedError: If HandBrakeCLI fails.
            OutputMissingError: If HandBrakeCLI succeeds without writing.
            TargetExistsError: If filename exists and overwrite is REJECT.
        """
        atomic = atomic if atomic is not None else AtomicPolicy.direct()
        with job_context(_new_job_id(), output_path=filename):
            start = time.monotonic()
            try:
                result = finalize_output(
                    filename,
                    overwrite,
                    atomic,
                    lambda working_path: self._run("--output", str(working_path)),
                )
            except OutputMissingError as e:
                if not self.trace:
                    logger.error("HandBrakeCLI output:\n%s", e.output)
                raise
            if result.working_path is not None:
                elapsed = int(time.monotonic() - start)
                logger.info("Transcode finished in %s", format_seconds(elapsed))
            return result

    def update(self) -> bool:
        """Check whether the HandBrakeCLI at bin_path is the current version.

        HandBrakeCLI reports that it is up to date whenever it cannot reach
        the update server, so a True result is not terribly reliable.
        """
        result = self._run("--update")
        return UP_TO_DATE_RE.search(result.output) is not None

    def preset_list(self) -> dict[str, dict[str, str]]:
        """List the presets HandBrakeCLI knows about.

        Returns:
            Mapping of preset category to a mapping of preset name to that
            preset's argument string.
        """
        result = self._run("--preset-list")
        return parse_preset_list(result.output)

    def _run(self, *more_args: str) -> RunnerResult:
        arguments = [self.bin_path, *self.arguments, *more_args]
        try:
            result = self._runner.run(arguments)
        except FileNotFoundError as e:
            if e.filename != self.bin_path:
                raise
            raise ToolNotFoundError(self.bin_path) from e
        if not result.success:
            if not self.trace:
                logger.error("HandBrakeCLI output:\n%s", result.output)
            raise ProcessFailedError(result.exit_code, arguments, result.output)
        return result

    def __repr__(self) -> str:
        return (
            f"HandBrakeCLI(bin_path={self.bin_path!r}, arguments={self.arguments!r})"
        )


def parse_preset_list(output: str) -> dict[str, dict[str, str]]:
    """Parse ``HandBrakeCLI --preset-list`` output.

    Args:
        output: Output containing ``< Category`` ... ``>`` blocks of
            ``+ Name: arguments`` lines.

    Returns:
        Mapping of category to preset name to argument string.
    """
    presets: dict[str, dict[str, str]] = {}
    for category, block in PRESET_CATEGORY_RE.findall(output):
        presets[category.strip()] = {
            name.strip(): args.strip() for name, args in PRESET_ENTRY_RE.findall(block)
        }
    return presets


def _new_job_id() -> str:
    return uuid.uuid4().hex[:8]

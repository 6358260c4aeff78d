"""Production ProcessRunner backed by subprocess."""

import logging
import subprocess  # nosec B404 - only used for TimeoutExpired
from collections.abc import Sequence

from handbrake.core.subprocess_utils import run_command
from handbrake.errors import ProcessTimeoutError
from handbrake.executor.interface import RunnerResult

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """ProcessRunner that spawns HandBrakeCLI with subprocess.

    When trace is enabled, the command line and each line of output are
    logged at INFO as they arrive. Otherwise output is only collected.
    """

    def __init__(self, trace: bool = False, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            trace: Log the command and stream its output to the log.
            timeout: Seconds to wait for exit once output closes (None = forever).
        """
        self.trace = trace
        self.timeout = timeout

    def run(self, arguments: Sequence[str]) -> RunnerResult:
        """Run HandBrakeCLI and collect its merged output.

        Args:
            arguments: Full argument vector, executable first.

        Returns:
            RunnerResult with merged output and exit code.

        Raises:
            FileNotFoundError: If the executable does not exist.
            ProcessTimeoutError: If HandBrakeCLI outlives the timeout.
        """
        on_line = None
        if self.trace:
            logger.info("Spawning HandBrakeCLI: %s", " ".join(arguments))
            on_line = _log_trace_line
        try:
            output, returncode = run_command(
                arguments, on_line=on_line, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ProcessTimeoutError(e.timeout, arguments, e.output or "") from e
        return RunnerResult(output=output, exit_code=returncode)


def _log_trace_line(line: str) -> None:
    logger.info("%s", line)

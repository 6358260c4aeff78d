"""Runner protocol for HandBrakeCLI invocation.

The invoker never spawns processes itself. It hands a complete argument
vector to a ProcessRunner and gets back the combined output and exit code.
Tests substitute a static runner; production uses SubprocessRunner.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class RunnerResult:
    """The raw result of one execution of HandBrakeCLI."""

    output: str
    """Combined stdout and stderr of the run."""

    exit_code: int
    """Process exit status."""

    @property
    def success(self) -> bool:
        """Return True if the process exited with status 0."""
        return self.exit_code == 0


class ProcessRunner(Protocol):
    """Protocol for synchronous HandBrakeCLI execution."""

    def run(self, arguments: Sequence[str]) -> RunnerResult:
        """Run a command and wait for it to exit.

        Args:
            arguments: Full argument vector, executable first.

        Returns:
            RunnerResult with merged output and exit code.
        """
        ...

"""Shared test fixtures for handbrake-py."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from handbrake.domain import Disc
from handbrake.executor import RunnerResult
from handbrake.introspector import parse_scan

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class StaticRunner:
    """ProcessRunner double that returns canned output and records each call.

    Args:
        output: Output returned from every run.
        exit_code: Exit code returned from every run.
        on_run: Optional callback receiving the argument vector before the
            result is returned, e.g. to create the output file.
    """

    def __init__(
        self,
        output: str = "",
        exit_code: int = 0,
        on_run: Callable[[list[str]], None] | None = None,
    ) -> None:
        self.output = output
        self.exit_code = exit_code
        self.on_run = on_run
        self.calls: list[list[str]] = []

    def run(self, arguments: Sequence[str]) -> RunnerResult:
        arguments = list(arguments)
        self.calls.append(arguments)
        if self.on_run is not None:
            self.on_run(arguments)
        return RunnerResult(output=self.output, exit_code=self.exit_code)

    @property
    def last_arguments(self) -> list[str]:
        """Argument vector of the most recent call."""
        return self.calls[-1]


def write_output_file(content: bytes = b"transcoded") -> Callable[[list[str]], None]:
    """Build an on_run callback that writes the file named after --output."""

    def _write(arguments: list[str]) -> None:
        path = Path(arguments[arguments.index("--output") + 1])
        path.write_bytes(content)

    return _write


def load_scan_fixture(name: str) -> str:
    """Load a captured HandBrakeCLI scan by file name."""
    return (FIXTURES_DIR / "scan" / name).read_text()


@pytest.fixture
def sample_scan_output() -> str:
    """HandBrakeCLI --title 0 --scan output of a DVD with five titles."""
    return load_scan_fixture("sample-titles-scan.txt")


@pytest.fixture
def sample_disc(sample_scan_output: str) -> Disc:
    """The sample scan parsed into a Disc."""
    return parse_scan(sample_scan_output)


@pytest.fixture
def static_runner() -> StaticRunner:
    """A runner that succeeds with no output."""
    return StaticRunner()


@pytest.fixture
def make_runner() -> type[StaticRunner]:
    """The StaticRunner class, for tests that need custom output or exit codes."""
    return StaticRunner


@pytest.fixture
def output_writer() -> Callable[..., Callable[[list[str]], None]]:
    """Factory for on_run callbacks that create the --output file."""
    return write_output_file

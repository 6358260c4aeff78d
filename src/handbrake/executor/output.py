"""Output file handling for transcodes.

finalize_output() decides which path HandBrakeCLI actually writes to, runs
the transcode through a caller-supplied callback, and then moves the result
into place according to the overwrite and atomicity policies.

Atomic modes write to a working file named after the final file with a
``.handbrake`` infix before the extension (``movie.m4v`` ->
``movie.handbrake.m4v``), so HandBrakeCLI still infers the container from the
extension. The final path is checked both before and after the run, since
another process may create it while the transcode is in progress. When that
happens under REJECT or SKIP, the working file is left where it is so its
contents can be recovered by hand.
"""

from __future__ import annotations

import errno
import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from handbrake.errors import (
    OutputMissingError,
    ProcessFailedError,
    TargetExistsError,
)
from handbrake.executor.interface import RunnerResult

logger = logging.getLogger(__name__)

TEMP_INFIX = "handbrake"


class OverwritePolicy(Enum):
    """What to do when the final output file already exists."""

    REPLACE = "replace"
    """Overwrite the existing file."""

    REJECT = "reject"
    """Raise TargetExistsError."""

    SKIP = "skip"
    """Leave the existing file alone and do not transcode."""


class AtomicMode(Enum):
    """Where HandBrakeCLI writes while the transcode runs."""

    DIRECT = "direct"
    TEMP_SAME_DIR = "temp_same_dir"
    TEMP_AT = "temp_at"


@dataclass(frozen=True)
class AtomicPolicy:
    """Atomicity policy for an output.

    Use the constructors rather than building instances directly:
    AtomicPolicy.direct(), AtomicPolicy.same_dir(), AtomicPolicy.temp_at(dir).
    """

    mode: AtomicMode = AtomicMode.DIRECT
    temp_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate that temp_dir is given exactly when it is used."""
        if self.mode == AtomicMode.TEMP_AT and self.temp_dir is None:
            raise ValueError("temp_dir is required for AtomicMode.TEMP_AT")
        if self.mode != AtomicMode.TEMP_AT and self.temp_dir is not None:
            raise ValueError(f"temp_dir is not used with {self.mode}")

    @classmethod
    def direct(cls) -> AtomicPolicy:
        """Write straight to the final path."""
        return cls(AtomicMode.DIRECT)

    @classmethod
    def same_dir(cls) -> AtomicPolicy:
        """Write to a working file beside the final path."""
        return cls(AtomicMode.TEMP_SAME_DIR)

    @classmethod
    def temp_at(cls, temp_dir: Path | str) -> AtomicPolicy:
        """Write to a working file in another directory."""
        return cls(AtomicMode.TEMP_AT, Path(temp_dir))

    @property
    def is_atomic(self) -> bool:
        """Return True if a working file is used."""
        return self.mode != AtomicMode.DIRECT


class OutputOutcome(Enum):
    """How finalize_output() finished."""

    WRITTEN = "written"
    """The final path holds the new transcode."""

    SKIPPED = "skipped"
    """The final path already existed; HandBrakeCLI was not run."""

    LEFT_IN_PLACE = "left_in_place"
    """The final path appeared during the run; the working file was kept."""


@dataclass(frozen=True)
class OutputResult:
    """Result of finalize_output()."""

    outcome: OutputOutcome
    final_path: Path
    working_path: Path | None = None
    """Path HandBrakeCLI wrote to, or None if it was not run."""


def temp_filename(filename: str) -> str:
    """Insert the temp infix before a filename's extension.

    Args:
        filename: Final file name (e.g., "movie.m4v").

    Returns:
        Working file name (e.g., "movie.handbrake.m4v", or "movie.handbrake"
        when there is no extension).
    """
    path = Path(filename)
    if path.suffix:
        return f"{path.stem}.{TEMP_INFIX}{path.suffix}"
    return f"{filename}.{TEMP_INFIX}"


def working_path_for(final_path: Path, atomic: AtomicPolicy) -> Path:
    """Compute the path HandBrakeCLI should write to.

    Args:
        final_path: Path the caller wants the output to end up at.
        atomic: Atomicity policy.

    Returns:
        The final path itself for DIRECT, otherwise a working file path.
    """
    if atomic.temp_dir is not None:
        return atomic.temp_dir / temp_filename(final_path.name)
    if atomic.mode == AtomicMode.TEMP_SAME_DIR:
        return final_path.with_name(temp_filename(final_path.name))
    return final_path


def finalize_output(
    desired_path: Path | str,
    overwrite: OverwritePolicy,
    atomic: AtomicPolicy,
    invoke: Callable[[Path], RunnerResult],
) -> OutputResult:
    """Run a transcode and put its output at desired_path.

    Args:
        desired_path: Final output path.
        overwrite: Policy for an existing final path, applied both before the
            run and, for atomic modes, again after it.
        atomic: Atomicity policy deciding the working path.
        invoke: Callback that runs HandBrakeCLI writing to the given path.

    Returns:
        OutputResult describing what happened.

    Raises:
        TargetExistsError: If the final path exists under REJECT, either
            before the run (nothing is invoked) or after it (the working
            file is kept).
        ProcessFailedError: If invoke reports a nonzero exit code.
        OutputMissingError: If invoke succeeds but the working path was not
            written.
        OSError: If the working directory cannot be created or the move fails.
    """
    final_path = Path(desired_path)

    if final_path.exists():
        if overwrite == OverwritePolicy.REJECT:
            raise TargetExistsError(final_path)
        if overwrite == OverwritePolicy.SKIP:
            logger.info(
                "Ignoring transcode to %s because it already exists", final_path
            )
            return OutputResult(OutputOutcome.SKIPPED, final_path)

    working_path = working_path_for(final_path, atomic)
    working_path.parent.mkdir(parents=True, exist_ok=True)

    result = invoke(working_path)
    if not result.success:
        raise ProcessFailedError(result.exit_code, output=result.output)
    if not working_path.exists():
        raise OutputMissingError(working_path, result.output)

    if working_path == final_path:
        return OutputResult(OutputOutcome.WRITTEN, final_path, working_path)

    if final_path.exists():
        logger.info("%s showed up during transcode", final_path)
        if overwrite == OverwritePolicy.REJECT:
            raise TargetExistsError(final_path)
        if overwrite == OverwritePolicy.SKIP:
            logger.info(
                "Leaving %s as is; copy %s manually to replace it",
                final_path,
                working_path,
            )
            return OutputResult(OutputOutcome.LEFT_IN_PLACE, final_path, working_path)
        logger.info("Replacing %s with new transcode", final_path)

    _move_over(working_path, final_path)
    logger.info("Moved %s to %s", working_path, final_path)
    return OutputResult(OutputOutcome.WRITTEN, final_path, working_path)


def _move_over(source: Path, destination: Path) -> None:
    """Move source onto destination, replacing any existing file."""
    try:
        source.replace(destination)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        # Working directory is on another filesystem
        shutil.move(str(source), str(destination))

"""Subprocess utilities for HandBrakeCLI invocation.

HandBrakeCLI writes its scan report and progress to stderr and a few status
lines to stdout, so both streams are merged and read line by line as they arrive.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for HandBrakeCLI invocation
import time
from collections.abc import Callable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str | Path],
    on_line: Callable[[str], None] | None = None,
    timeout: float | None = None,
    errors: str = "replace",
) -> tuple[str, int]:
    """Run an external command with stdout and stderr merged.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        on_line: Optional callback receiving each output line (without the
            trailing newline) as soon as it is read.
        timeout: Seconds to wait for the process after its output closes.
            None waits indefinitely.
        errors: Error handling mode for text decoding (default "replace").

    Returns:
        Tuple of (combined output, returncode).

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the process outlives the timeout. Its
            output attribute holds the output read so far.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    chunks: list[str] = []

    with subprocess.Popen(  # nosec B603 - arguments are passed without a shell
        str_args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        text=True,
        errors=errors,
    ) as process:
        assert process.stdout is not None
        for line in process.stdout:
            chunks.append(line)
            if on_line is not None:
                on_line(line.rstrip("\r\n"))
        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            e.output = "".join(chunks)
            logger.warning(
                "Command timed out after %ss: %s",
                timeout,
                " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
                extra={"command": command_name, "timeout_seconds": timeout},
            )
            raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": returncode,
        },
    )
    return "".join(chunks), returncode

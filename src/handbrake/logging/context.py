"""Job context for structured logging.

Several commands may run at once from different threads. job_context()
tags every log record produced while a command runs with a short job id
and, for transcodes, the output path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_output_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "output_path", default=None
)


@contextmanager
def job_context(
    job_id: str,
    output_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager tagging log records with a job.

    The previous context is restored on exit, so jobs may nest.

    Args:
        job_id: Short job identifier (e.g., "3f2a9c01").
        output_path: Final output path of a transcode, if any.

    Example:
        with job_context("3f2a9c01", "/movies/movie.m4v"):
            logger.info("Transcoding")  # Automatically includes context
    """
    job_token = _job_id.set(job_id)
    path_token = _output_path.set(str(output_path) if output_path is not None else None)
    try:
        yield
    finally:
        _output_path.reset(path_token)
        _job_id.reset(job_token)


def get_job_context() -> tuple[str | None, str | None]:
    """Get current job context.

    Returns:
        Tuple of (job_id, output_path), either may be None.
    """
    return _job_id.get(), _output_path.get()


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and output_path attributes for JSON output, and a compact
    job_tag like ``[3f2a9c01] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject job context into the record. Never filters anything out."""
        job_id, output_path = get_job_context()

        record.job_id = job_id
        record.output_path = output_path
        record.job_tag = f"[{job_id}] " if job_id else ""

        return True

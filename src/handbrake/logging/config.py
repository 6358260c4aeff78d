"""Root logger setup from LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from handbrake.logging.context import JobContextFilter
from handbrake.logging.handlers import JSONFormatter, text_formatter

if TYPE_CHECKING:
    from handbrake.config.models import LoggingConfig

logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    Records go to a rotating log file when config.file is set, and to stderr
    when no file is set, the file cannot be opened, or include_stderr is on.
    Every handler tags records with the current job context.

    Args:
        config: Logging configuration.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = (
        JSONFormatter() if config.format.lower() == "json" else text_formatter()
    )

    handlers: list[logging.Handler] = []
    file_error: OSError | None = None
    if config.file:
        try:
            handlers.append(_rotating_file_handler(config))
        except OSError as e:
            file_error = e
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    job_filter = JobContextFilter()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(job_filter)
        root.addHandler(handler)

    if file_error is not None:
        logger.warning(
            "Could not open log file %s, logging to stderr: %s",
            config.file,
            file_error,
        )


def _rotating_file_handler(config: LoggingConfig) -> RotatingFileHandler:
    path = Path(config.file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )

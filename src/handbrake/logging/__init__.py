"""Structured logging module.

Provides configurable logging with JSON format support and file rotation,
plus job context tagging for commands running concurrently.
"""

from handbrake.logging.config import configure_logging
from handbrake.logging.context import (
    JobContextFilter,
    get_job_context,
    job_context,
)
from handbrake.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
]

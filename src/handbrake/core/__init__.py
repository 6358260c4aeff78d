"""Core utilities package.

This package contains small helpers shared across the codebase: duration
conversion and subprocess invocation.
"""

from handbrake.core.datetime_utils import format_seconds, parse_duration_seconds
from handbrake.core.subprocess_utils import run_command

__all__ = [
    "format_seconds",
    "parse_duration_seconds",
    "run_command",
]

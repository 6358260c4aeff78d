"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, profile)
    20-29: Target/file errors
    30-39: Tool/dependency errors
    40-49: Operation errors
    50-59: Parse errors
    60-69: Warning states
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for handbrake-py CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    PROFILE_NOT_FOUND = 12

    # Target/file errors (20-29)
    TARGET_NOT_FOUND = 20
    TARGET_EXISTS = 21

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    OPERATION_FAILED = 40
    OPERATION_TIMEOUT = 41

    # Parse errors (50-59)
    PARSE_ERROR = 51

    # Warning states (60-69)
    WARNINGS = 60

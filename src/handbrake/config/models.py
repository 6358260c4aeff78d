"""Configuration data models.

This module defines dataclasses for handbrake-py configuration options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from handbrake.executor.output import AtomicPolicy, OverwritePolicy

_OVERWRITE_VALUES = frozenset(p.value for p in OverwritePolicy)


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    If not specified, HandBrakeCLI is looked up in PATH.
    """

    handbrake_cli: Path | None = None


@dataclass
class ExecutionConfig:
    """Configuration for running HandBrakeCLI."""

    # Stream HandBrakeCLI output to the log while it runs
    trace: bool = False

    # Seconds to wait for HandBrakeCLI to exit once its output closes
    # (None = wait forever)
    timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass
class OutputConfig:
    """Default policies for transcode output files."""

    # What to do if the output exists: replace, reject or skip
    overwrite: str = "replace"

    # Transcode into a working file and move it into place on success
    atomic: bool = False

    # Directory for working files (None = beside the output)
    temp_directory: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.overwrite = self.overwrite.lower()
        if self.overwrite not in _OVERWRITE_VALUES:
            raise ValueError(
                f"overwrite must be one of {sorted(_OVERWRITE_VALUES)}, "
                f"got {self.overwrite}"
            )

    def overwrite_policy(self) -> OverwritePolicy:
        """Return the configured OverwritePolicy."""
        return OverwritePolicy(self.overwrite)

    def atomic_policy(self) -> AtomicPolicy:
        """Return the configured AtomicPolicy."""
        if not self.atomic:
            return AtomicPolicy.direct()
        if self.temp_directory is not None:
            return AtomicPolicy.temp_at(self.temp_directory)
        return AtomicPolicy.same_dir()


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class HandBrakeConfig:
    """Complete handbrake-py configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

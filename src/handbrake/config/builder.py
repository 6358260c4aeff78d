"""Configuration builder with explicit layering.

ConfigBuilder composes HandBrakeConfig from several ConfigSources. Later
sources override earlier ones, so applying file, environment and CLI sources
in that order gives CLI values the highest precedence.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from handbrake.config.env import EnvReader
from handbrake.config.models import (
    ExecutionConfig,
    HandBrakeConfig,
    LoggingConfig,
    OutputConfig,
    ToolPathsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified in this source" and never overrides a value
    from a lower-precedence source.
    """

    # Tool paths
    handbrake_cli: Path | None = None

    # Execution
    trace: bool | None = None
    timeout: float | None = None

    # Output policies
    overwrite: str | None = None
    atomic: bool | None = None
    temp_directory: Path | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds HandBrakeConfig by layering ConfigSources.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._origins: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply a source, overriding values set by earlier sources.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded for each value this source sets.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._origins[field_obj.name] = source_name

    def origin(self, key: str) -> str | None:
        """Return the name of the source that set key, or None for defaults."""
        return self._origins.get(key)

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> HandBrakeConfig:
        """Build the final HandBrakeConfig with defaults for unset values.

        Raises:
            ValueError: If a value fails model validation.
        """
        tools = ToolPathsConfig(handbrake_cli=self._get("handbrake_cli", None))

        execution_defaults = ExecutionConfig()
        execution = ExecutionConfig(
            trace=self._get("trace", execution_defaults.trace),
            timeout=self._get("timeout", execution_defaults.timeout),
        )

        output_defaults = OutputConfig()
        output = OutputConfig(
            overwrite=self._get("overwrite", output_defaults.overwrite),
            atomic=self._get("atomic", output_defaults.atomic),
            temp_directory=self._get(
                "temp_directory", output_defaults.temp_directory
            ),
        )

        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=self._get("logging_level", logging_defaults.level),
            file=self._get("logging_file", logging_defaults.file),
            format=self._get("logging_format", logging_defaults.format),
            include_stderr=self._get(
                "logging_include_stderr", logging_defaults.include_stderr
            ),
            max_bytes=self._get("logging_max_bytes", logging_defaults.max_bytes),
            backup_count=self._get(
                "logging_backup_count", logging_defaults.backup_count
            ),
        )

        return HandBrakeConfig(
            tools=tools,
            execution=execution,
            output=output,
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed TOML config file.

    Recognized tables are [tools], [execution], [output] and [logging].
    """
    tools = file_config.get("tools", {})
    execution = file_config.get("execution", {})
    output = file_config.get("output", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        handbrake_cli=_optional_path(tools.get("handbrake_cli")),
        trace=execution.get("trace"),
        timeout=execution.get("timeout"),
        overwrite=output.get("overwrite"),
        atomic=output.get("atomic"),
        temp_directory=_optional_path(output.get("temp_directory")),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from HBPY_* environment variables."""
    return ConfigSource(
        handbrake_cli=reader.get_path("HBPY_HANDBRAKE_CLI"),
        trace=reader.get_bool("HBPY_TRACE"),
        timeout=reader.get_float("HBPY_TIMEOUT"),
        overwrite=reader.get_str("HBPY_OVERWRITE"),
        atomic=reader.get_bool("HBPY_ATOMIC"),
        temp_directory=reader.get_path("HBPY_TEMP_DIR", must_exist=True),
        logging_level=reader.get_str("HBPY_LOG_LEVEL"),
        logging_file=reader.get_path("HBPY_LOG_FILE"),
        logging_format=reader.get_str("HBPY_LOG_FORMAT"),
    )

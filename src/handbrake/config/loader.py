"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (HBPY_*)
3. Config file (~/.handbrake-py/config.toml)
4. Default values

Environment variables:
- HBPY_CONFIG_PATH: Path to config file (overrides default location)
- HBPY_DATA_DIR: Data directory (overrides ~/.handbrake-py/)
- HBPY_HANDBRAKE_CLI: Path to the HandBrakeCLI executable
- HBPY_TRACE: Stream HandBrakeCLI output to the log
- HBPY_TIMEOUT: Seconds to wait for HandBrakeCLI to exit after its output closes
- HBPY_OVERWRITE: Default overwrite policy (replace, reject, skip)
- HBPY_ATOMIC: Write transcodes to a working file first
- HBPY_TEMP_DIR: Directory for working files (must exist)
- HBPY_LOG_LEVEL, HBPY_LOG_FILE, HBPY_LOG_FORMAT: Logging overrides
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from handbrake.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from handbrake.config.env import EnvReader
from handbrake.config.models import HandBrakeConfig
from handbrake.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".handbrake-py"
CONFIG_FILENAME = "config.toml"


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the handbrake-py data directory.

    This holds config.toml and the profiles/ directory. Can be overridden
    by HBPY_DATA_DIR (with tilde expansion).

    Returns:
        Path to the data directory (~/.handbrake-py/ by default).
    """
    reader = env_reader or EnvReader()
    return reader.get_path("HBPY_DATA_DIR", default=DEFAULT_DATA_DIR)


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    HBPY_CONFIG_PATH wins; otherwise config.toml in the data directory.
    """
    reader = env_reader or EnvReader()
    env_path = reader.get_path("HBPY_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILENAME


def load_config_file(path: Path, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file.
        strict: If True, raise ConfigError when the file cannot be read or
            parsed. If False, log a warning and use defaults instead.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file is unreadable or invalid.
    """
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Cannot load config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    handbrake_cli: Path | None = None,
    trace: bool | None = None,
    overwrite: str | None = None,
    atomic: bool | None = None,
    temp_directory: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> HandBrakeConfig:
    """Get handbrake-py configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides HBPY_CONFIG_PATH).
        handbrake_cli: CLI override for the HandBrakeCLI path.
        trace: CLI override for trace mode.
        overwrite: CLI override for the overwrite policy.
        atomic: CLI override for atomic output.
        temp_directory: CLI override for the working file directory.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, an unreadable config file raises ConfigError.

    Returns:
        HandBrakeConfig with merged configuration.

    Raises:
        ConfigError: If a merged value is invalid, or (with strict) the
            config file cannot be loaded.
    """
    reader = env_reader or EnvReader()

    if config_path is None:
        config_path = get_default_config_path(reader)
    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        handbrake_cli=handbrake_cli,
        trace=trace,
        overwrite=overwrite,
        atomic=atomic,
        temp_directory=temp_directory,
    )

    # Build with precedence: file < env < cli
    builder = ConfigBuilder()
    try:
        builder.apply(source_from_file(file_config), source_name="file")
        builder.apply(source_from_env(reader), source_name="env")
        builder.apply(cli_source, source_name="cli")
        config = builder.build()
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Using %s (from %s)",
        config.tools.handbrake_cli or "HandBrakeCLI on PATH",
        builder.origin("handbrake_cli") or "defaults",
    )
    return config

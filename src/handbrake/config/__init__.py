"""Configuration for handbrake-py.

Configuration is merged from defaults, ~/.handbrake-py/config.toml, HBPY_*
environment variables and CLI options, in increasing precedence.
"""

from handbrake.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from handbrake.config.env import EnvReader
from handbrake.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from handbrake.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from handbrake.config.models import (
    ExecutionConfig,
    HandBrakeConfig,
    LoggingConfig,
    OutputConfig,
    ToolPathsConfig,
)
from handbrake.config.profiles import (
    Profile,
    ProfileError,
    ProfileModel,
    ProfileNotFoundError,
    apply_profile,
    get_profiles_directory,
    list_profiles,
    load_profile,
)

__all__ = [
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
    "EnvReader",
    # Loader
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
    # Models
    "ExecutionConfig",
    "HandBrakeConfig",
    "LoggingConfig",
    "OutputConfig",
    "ToolPathsConfig",
    # Profiles
    "Profile",
    "ProfileError",
    "ProfileModel",
    "ProfileNotFoundError",
    "apply_profile",
    "get_profiles_directory",
    "list_profiles",
    "load_profile",
]

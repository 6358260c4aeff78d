"""Environment variable reader with dependency injection support.

EnvReader reads and converts HBPY_* variables. Tests pass a plain dict
instead of touching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        reader = EnvReader(env={"HBPY_TRACE": "yes"})
        reader.get_bool("HBPY_TRACE")  # True
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string, or default if the variable is not set."""
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float, or default if not set or unparseable.

        Logs a warning if the value is set but cannot be parsed.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean, or default if not set.

        "true", "1", "yes" and "on" (any case) are true; any other value is
        false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Get a path with tilde expansion, or default if not set.

        Args:
            var: Environment variable name.
            must_exist: If True, a path that does not exist is logged and
                default is returned instead.
            default: Default value.
        """
        value = self._env.get(var)
        if not value:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path

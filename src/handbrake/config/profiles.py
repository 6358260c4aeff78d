"""Transcode profile management.

A profile is a named set of HandBrakeCLI switches stored as YAML in
~/.handbrake-py/profiles/<name>.yaml and applied with --profile:

    description: Small MP4 for tablets
    options:
      format: av_mp4
      quality: 22
      large_file: true
      audio: [1, 2]

Option values map onto switches as follows: true gives a bare switch,
false or null leaves the switch out, a scalar gives one value and a list
gives several values. Options are applied in file order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from handbrake.config.env import EnvReader
from handbrake.config.loader import get_data_dir
from handbrake.errors import ConfigError
from handbrake.executor.command import CommandBuilder

logger = logging.getLogger(__name__)

PROFILE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
PROFILE_SUFFIX = ".yaml"

OptionValue = bool | int | float | str | list[int | float | str] | None


class ProfileError(ConfigError):
    """Error loading or validating a profile."""

    pass


class ProfileNotFoundError(ProfileError):
    """Profile does not exist."""

    pass


class ProfileModel(BaseModel):
    """Pydantic model for a profile file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    description: str | None = None
    options: dict[str, OptionValue] = Field(default_factory=dict)

    @field_validator("options")
    @classmethod
    def validate_option_names(
        cls, v: dict[str, OptionValue]
    ) -> dict[str, OptionValue]:
        """Reject empty or whitespace-containing switch names."""
        for name in v:
            if not name or any(ch.isspace() for ch in name):
                raise ValueError(f"invalid option name: {name!r}")
        return v


@dataclass(frozen=True)
class Profile:
    """A loaded profile."""

    name: str
    description: str | None = None
    options: dict[str, Any] = field(default_factory=dict)


def get_profiles_directory(env_reader: EnvReader | None = None) -> Path:
    """Get the profiles directory path.

    Returns:
        Path to <data dir>/profiles/ (~/.handbrake-py/profiles/ by default).
    """
    return get_data_dir(env_reader) / "profiles"


def list_profiles(profiles_dir: Path | None = None) -> list[str]:
    """List available profile names, sorted.

    Args:
        profiles_dir: Directory to search (defaults to get_profiles_directory()).

    Returns:
        Profile names without the .yaml extension.
    """
    profiles_dir = profiles_dir or get_profiles_directory()
    if not profiles_dir.exists():
        return []

    return sorted(
        p.stem
        for p in profiles_dir.glob(f"*{PROFILE_SUFFIX}")
        if p.is_file() and not p.name.startswith(".")
    )


def _format_validation_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first_error = errors[0]
    loc = ".".join(str(x) for x in first_error.get("loc", []))
    msg = first_error.get("msg", str(error))
    return f"{loc}: {msg}" if loc else msg


def load_profile(name: str, profiles_dir: Path | None = None) -> Profile:
    """Load a profile by name.

    Args:
        name: Profile name (without .yaml extension).
        profiles_dir: Directory to load from (defaults to
            get_profiles_directory()).

    Returns:
        The loaded Profile.

    Raises:
        ProfileNotFoundError: If the profile doesn't exist.
        ProfileError: If the name or the file contents are invalid.
    """
    if not PROFILE_NAME_RE.match(name):
        raise ProfileError(f"Profile name must be alphanumeric (with - or _): {name}")

    profiles_dir = profiles_dir or get_profiles_directory()
    profile_path = profiles_dir / f"{name}{PROFILE_SUFFIX}"

    if not profile_path.exists():
        raise ProfileNotFoundError(f"Profile not found: {name}")

    try:
        with open(profile_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid YAML in profile {name}: {e}") from e

    if not isinstance(data, dict):
        raise ProfileError(f"Profile {name} must be a YAML mapping")

    try:
        model = ProfileModel.model_validate(data)
    except ValidationError as e:
        raise ProfileError(
            f"Invalid profile {name}: {_format_validation_error(e)}"
        ) from e

    logger.debug("Loaded profile %s from %s", name, profile_path)
    return Profile(name=name, description=model.description, options=model.options)


def apply_profile(builder: CommandBuilder, profile: Profile) -> CommandBuilder:
    """Return a builder with the profile's options appended.

    Args:
        builder: Base command (not modified).
        profile: Profile to apply.

    Returns:
        A new CommandBuilder.
    """
    for option, value in profile.options.items():
        if value is True:
            builder = builder.with_(option)
        elif value is False or value is None:
            continue
        elif isinstance(value, list):
            builder = builder.with_(option, *value)
        else:
            builder = builder.with_(option, value)
    return builder

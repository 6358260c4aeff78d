"""Python front-end for HandBrakeCLI.

Build commands with an immutable, forkable HandBrakeCLI invoker, scan discs
into Disc/Title/Chapter objects and transcode with overwrite and atomic
output policies:

    from handbrake import HandBrakeCLI

    dvd = HandBrakeCLI().with_("input", "/dev/disk2")
    disc = dvd.scan()
    dvd.with_("title", disc.main_feature.number).output("movie.m4v")
"""

from handbrake.domain import Chapter, Disc, Title
from handbrake.errors import (
    ConfigError,
    HandBrakeError,
    OutputMissingError,
    ProcessFailedError,
    ProcessTimeoutError,
    TargetExistsError,
    ToolNotFoundError,
    UnrecognizedFormatError,
)
from handbrake.executor import (
    AtomicPolicy,
    CommandBuilder,
    HandBrakeCLI,
    OutputOutcome,
    OutputResult,
    OverwritePolicy,
)
from handbrake.introspector import parse_scan, parse_tree

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Chapter",
    "Disc",
    "Title",
    "ConfigError",
    "HandBrakeError",
    "OutputMissingError",
    "ProcessFailedError",
    "ProcessTimeoutError",
    "TargetExistsError",
    "ToolNotFoundError",
    "UnrecognizedFormatError",
    "AtomicPolicy",
    "CommandBuilder",
    "HandBrakeCLI",
    "OutputOutcome",
    "OutputResult",
    "OverwritePolicy",
    "parse_scan",
    "parse_tree",
]

"""Executor module for running HandBrakeCLI.

- CommandBuilder: immutable, forkable list of HandBrakeCLI switches
- HandBrakeCLI: invoker pairing a CommandBuilder with a ProcessRunner
- finalize_output: overwrite/atomic handling for transcode output files
- ProcessRunner / SubprocessRunner: process execution
"""

from handbrake.executor.command import CommandArgument, CommandBuilder, switch_name
from handbrake.executor.handbrake_cli import HandBrakeCLI, parse_preset_list
from handbrake.executor.interface import ProcessRunner, RunnerResult
from handbrake.executor.output import (
    AtomicMode,
    AtomicPolicy,
    OutputOutcome,
    OutputResult,
    OverwritePolicy,
    finalize_output,
    temp_filename,
    working_path_for,
)
from handbrake.executor.runner import SubprocessRunner

__all__ = [
    "CommandArgument",
    "CommandBuilder",
    "switch_name",
    "HandBrakeCLI",
    "parse_preset_list",
    "ProcessRunner",
    "RunnerResult",
    "SubprocessRunner",
    # Output handling
    "AtomicMode",
    "AtomicPolicy",
    "OutputOutcome",
    "OutputResult",
    "OverwritePolicy",
    "finalize_output",
    "temp_filename",
    "working_path_for",
]

"""HandBrakeCLI command building.

A CommandBuilder is an immutable list of switches. Every call to with_()
returns a new builder and leaves the receiver untouched, so a base
configuration can be shared and forked freely, including from several
threads at once:

    base = CommandBuilder().with_("input", "/dev/disk2")
    movie = base.with_("title", 1).with_("preset", "Fast 1080p30")
    extras = base.with_("title", 6).with_("markers")

Switch names are not validated. Any identifier is turned into a flag
mechanically (``native_language`` -> ``--native-language``); if HandBrakeCLI
does not know the switch it fails when invoked.
"""

from __future__ import annotations

from dataclasses import dataclass


def switch_name(identifier: str) -> str:
    """Convert an identifier into a HandBrakeCLI long switch.

    Underscores become hyphens and ``--`` is prefixed. Identifiers that are
    already written as switches (``--title``) are returned unchanged.

    Args:
        identifier: Switch identifier (e.g., "native_language").

    Returns:
        Switch as passed on the command line (e.g., "--native-language").
    """
    if identifier.startswith("--"):
        return identifier
    return "--" + identifier.replace("_", "-")


@dataclass(frozen=True)
class CommandArgument:
    """One switch and the values that follow it."""

    switch: str
    values: tuple[str, ...] = ()

    def to_argument_vector(self) -> list[str]:
        """Return the switch followed by its values."""
        return [self.switch, *self.values]


class CommandBuilder:
    """Immutable, forkable sequence of HandBrakeCLI switches."""

    __slots__ = ("_arguments",)

    def __init__(self, arguments: tuple[CommandArgument, ...] = ()) -> None:
        self._arguments = tuple(arguments)

    @property
    def arguments(self) -> tuple[CommandArgument, ...]:
        """The switches in the order they were added."""
        return self._arguments

    def with_(self, identifier: str, *args: object) -> CommandBuilder:
        """Return a copy of this builder with one more switch appended.

        Args:
            identifier: Switch identifier; converted with switch_name().
            *args: Values for the switch. Each is converted with str().

        Returns:
            New CommandBuilder. The receiver is not modified.
        """
        argument = CommandArgument(
            switch=switch_name(identifier),
            values=tuple(str(arg) for arg in args),
        )
        return CommandBuilder(self._arguments + (argument,))

    def to_argument_vector(self) -> list[str]:
        """Flatten all switches and values into one argument list."""
        vector: list[str] = []
        for argument in self._arguments:
            vector.extend(argument.to_argument_vector())
        return vector

    def contains_switch(self, identifier: str) -> bool:
        """Check whether a switch has already been added.

        Args:
            identifier: Switch identifier or literal switch (e.g., "--title").
        """
        wanted = switch_name(identifier)
        return any(argument.switch == wanted for argument in self._arguments)

    def __len__(self) -> int:
        return len(self._arguments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandBuilder):
            return NotImplemented
        return self._arguments == other._arguments

    def __hash__(self) -> int:
        return hash(self._arguments)

    def __repr__(self) -> str:
        return f"CommandBuilder({self.to_argument_vector()!r})"

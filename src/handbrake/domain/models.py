"""Domain models for HandBrakeCLI scan results.

A Disc owns its Titles and each Title owns its Chapters, keyed by number.
Titles and Chapters keep a weak reference back to their owner, so the graph
can be navigated upward without creating reference cycles. The back
references are wired once, when the owner is constructed.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from handbrake.core.datetime_utils import parse_duration_seconds

if TYPE_CHECKING:
    from handbrake.introspector.tree import Node


@dataclass
class Chapter:
    """A chapter of a title."""

    number: int
    duration: str  # "hh:mm:ss"
    _title_ref: weakref.ReferenceType[Title] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def title(self) -> Title | None:
        """The title containing this chapter, or None if it is unattached."""
        return self._title_ref() if self._title_ref is not None else None

    @property
    def seconds(self) -> int:
        """The duration in seconds (e.g., "00:03:23" -> 203)."""
        return parse_duration_seconds(self.duration)


@dataclass
class Title:
    """A title (movie, episode, extra) detected on the source."""

    number: int
    duration: str  # "hh:mm:ss"
    chapters: dict[int, Chapter] = field(default_factory=dict)
    is_main_feature: bool = False
    _disc_ref: weakref.ReferenceType[Disc] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Point each chapter back at this title."""
        for chapter in self.chapters.values():
            chapter._title_ref = weakref.ref(self)

    @property
    def disc(self) -> Disc | None:
        """The disc this title belongs to, or None if it is unattached."""
        return self._disc_ref() if self._disc_ref is not None else None

    @property
    def seconds(self) -> int:
        """The duration in seconds (e.g., "01:43:54" -> 6234)."""
        return parse_duration_seconds(self.duration)

    @property
    def ordered_chapters(self) -> list[Chapter]:
        """The chapters sorted by chapter number."""
        return [self.chapters[number] for number in sorted(self.chapters)]


@dataclass
class Disc:
    """The result of scanning a source with HandBrakeCLI.

    raw_output and raw_tree are kept for debugging. They take no part in
    equality and are never serialized.
    """

    name: str
    titles: dict[int, Title] = field(default_factory=dict)
    raw_output: str | None = field(default=None, repr=False, compare=False)
    raw_tree: Node | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Point each title back at this disc."""
        for title in self.titles.values():
            title._disc_ref = weakref.ref(self)

    @property
    def ordered_titles(self) -> list[Title]:
        """The titles sorted by title number."""
        return [self.titles[number] for number in sorted(self.titles)]

    @property
    def main_feature(self) -> Title | None:
        """The title HandBrake considers the main feature, if any."""
        return next((t for t in self.ordered_titles if t.is_main_feature), None)

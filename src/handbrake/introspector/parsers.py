"""Parsing functions for HandBrakeCLI scan output.

These functions turn the outline tree built by handbrake.introspector.tree
into Disc/Title/Chapter objects. All knowledge of the scan layout lives
here; the tree parser itself is schema-less.

Every required field raises UnrecognizedFormatError when it is missing.
Main-feature detection is a presence test and never fails.
"""

import logging
import re
from pathlib import PurePosixPath, PureWindowsPath

from handbrake.domain.models import Chapter, Disc, Title
from handbrake.errors import UnrecognizedFormatError
from handbrake.introspector.tree import Node, parse_tree

logger = logging.getLogger(__name__)

TITLE_NUMBER_RE = re.compile(r"title (\d+)")
TITLE_DURATION_RE = re.compile(r"duration: (\d\d:\d\d:\d\d)")
CHAPTER_NUMBER_RE = re.compile(r"(\d+): cells")
CHAPTER_DURATION_RE = re.compile(r"duration (\d\d:\d\d:\d\d)")
SCAN_PATH_RE = re.compile(r"path=([^,]*),")

SCAN_LINE_MARKER = "hb_scan"
DURATION_LABEL = "duration"
CHAPTERS_LABEL = "chapters:"
MAIN_FEATURE_MARKER = "Main Feature"


def _require(pattern: re.Pattern[str], text: str, field: str) -> str:
    match = pattern.search(text)
    if match is None:
        raise UnrecognizedFormatError(field, text)
    return match.group(1)


def parse_chapter(node: Node) -> Chapter:
    """Build a Chapter from a node like ``5: cells 4->4, ..., duration 00:03:23``.

    Raises:
        UnrecognizedFormatError: If the number or duration is missing.
    """
    return Chapter(
        number=int(_require(CHAPTER_NUMBER_RE, node.name, "chapter number")),
        duration=_require(CHAPTER_DURATION_RE, node.name, "chapter duration"),
    )


def parse_title(node: Node) -> Title:
    """Build a Title, with its chapters, from a ``title N:`` node.

    Raises:
        UnrecognizedFormatError: If the number, the duration entry or the
            chapters entry is missing.
    """
    number = int(_require(TITLE_NUMBER_RE, node.name, "title number"))

    duration_node = node.find_child(lambda c: DURATION_LABEL in c.name)
    if duration_node is None:
        raise UnrecognizedFormatError("title duration", node.name)
    duration = _require(TITLE_DURATION_RE, duration_node.name, "title duration")

    chapters_node = node.find_child(lambda c: c.name.startswith(CHAPTERS_LABEL))
    if chapters_node is None:
        raise UnrecognizedFormatError("chapter list", node.name)

    chapters: dict[int, Chapter] = {}
    for chapter_node in chapters_node.children:
        chapter = parse_chapter(chapter_node)
        if chapter.number in chapters:
            logger.warning(
                "Duplicate chapter %d in title %d; keeping the last one",
                chapter.number,
                number,
            )
        chapters[chapter.number] = chapter

    is_main_feature = node.find_child(lambda c: MAIN_FEATURE_MARKER in c.name)

    return Title(
        number=number,
        duration=duration,
        chapters=chapters,
        is_main_feature=is_main_feature is not None,
    )


def parse_disc_name(output: str) -> str:
    """Extract the scanned source's base name from the ``hb_scan`` log line.

    Args:
        output: Complete HandBrakeCLI scan output.

    Returns:
        Base name of the scanned path (e.g., "D2" for "/Volumes/D2").

    Raises:
        UnrecognizedFormatError: If there is no hb_scan line or it has no path.
    """
    scan_line = next(
        (line for line in output.splitlines() if SCAN_LINE_MARKER in line), None
    )
    if scan_line is None:
        raise UnrecognizedFormatError("hb_scan line", "")
    path = _require(SCAN_PATH_RE, scan_line, "scanned path")
    return _basename(path)


def _basename(path: str) -> str:
    pure = PureWindowsPath(path) if "\\" in path else PurePosixPath(path)
    return pure.name or path


def extract_disc(root: Node, name: str) -> Disc:
    """Build a Disc from a parsed scan tree.

    Args:
        root: Root node returned by parse_tree().
        name: Disc name, usually from parse_disc_name().

    Returns:
        Disc with its titles keyed by title number.
    """
    titles: dict[int, Title] = {}
    for title_node in root.children:
        title = parse_title(title_node)
        if title.number in titles:
            logger.warning("Duplicate title %d; keeping the last one", title.number)
        titles[title.number] = title
    return Disc(name=name, titles=titles)


def parse_scan(output: str) -> Disc:
    """Parse complete ``HandBrakeCLI --scan`` output into a Disc.

    Args:
        output: Complete HandBrakeCLI scan output.

    Returns:
        Disc with raw_output and raw_tree populated.

    Raises:
        UnrecognizedFormatError: If a required field is missing.
    """
    name = parse_disc_name(output)
    root = parse_tree(output)
    disc = extract_disc(root, name)
    disc.raw_output = output
    disc.raw_tree = root
    logger.debug("Parsed scan of %s: %d title(s)", name, len(disc.titles))
    return disc

"""Formatters and serialization for scan results.

This module converts Disc graphs to plain dicts, JSON, YAML and
human-readable text, and rebuilds Discs from the dict/YAML form. The raw
scan output and tree are never serialized; back references are rebuilt on
load by the model constructors.
"""

import json
from typing import Any

import yaml

from handbrake.domain.models import Chapter, Disc, Title


def chapter_to_dict(chapter: Chapter) -> dict[str, Any]:
    """Convert a Chapter to a dictionary."""
    return {
        "number": chapter.number,
        "duration": chapter.duration,
        "seconds": chapter.seconds,
    }


def title_to_dict(title: Title) -> dict[str, Any]:
    """Convert a Title, with its chapters, to a dictionary."""
    return {
        "number": title.number,
        "duration": title.duration,
        "seconds": title.seconds,
        "main_feature": title.is_main_feature,
        "chapters": [chapter_to_dict(c) for c in title.ordered_chapters],
    }


def disc_to_dict(disc: Disc) -> dict[str, Any]:
    """Convert a Disc to a dictionary suitable for JSON or YAML.

    Args:
        disc: The disc to convert.

    Returns:
        Dictionary with the disc name and its titles in number order.
    """
    return {
        "name": disc.name,
        "titles": [title_to_dict(t) for t in disc.ordered_titles],
    }


def disc_from_dict(data: dict[str, Any]) -> Disc:
    """Rebuild a Disc from the output of disc_to_dict().

    Derived fields such as ``seconds`` are ignored and recomputed.

    Args:
        data: Dictionary produced by disc_to_dict().

    Returns:
        A new Disc with back references wired.

    Raises:
        ValueError: If a required key is missing or has the wrong type.
    """
    try:
        titles = {}
        for title_data in data.get("titles") or []:
            chapters = {
                int(c["number"]): Chapter(
                    number=int(c["number"]), duration=str(c["duration"])
                )
                for c in title_data.get("chapters") or []
            }
            title = Title(
                number=int(title_data["number"]),
                duration=str(title_data["duration"]),
                chapters=chapters,
                is_main_feature=bool(title_data.get("main_feature", False)),
            )
            titles[title.number] = title
        return Disc(name=str(data["name"]), titles=titles)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid disc data: {e}") from e


def format_json(disc: Disc) -> str:
    """Format a Disc as indented JSON."""
    return json.dumps(disc_to_dict(disc), indent=2)


def format_yaml(disc: Disc) -> str:
    """Format a Disc as YAML."""
    return yaml.safe_dump(disc_to_dict(disc), sort_keys=False)


def load_yaml(text: str) -> Disc:
    """Rebuild a Disc from YAML written by format_yaml().

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
        ValueError: If the document does not describe a disc.
    """
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Invalid disc data: expected a mapping")
    return disc_from_dict(data)


def format_human(disc: Disc) -> str:
    """Format a Disc for terminal output.

    Args:
        disc: The disc to format.

    Returns:
        Formatted string, one line per title followed by its chapters.
    """
    lines = [f"Disc: {disc.name}", ""]

    if not disc.titles:
        lines.append("  (no titles found)")

    for title in disc.ordered_titles:
        marker = "  [main feature]" if title.is_main_feature else ""
        lines.append(
            f"Title {title.number}: {title.duration} "
            f"({len(title.chapters)} chapters){marker}"
        )
        for chapter in title.ordered_chapters:
            lines.append(f"  Chapter {chapter.number:>3}: {chapter.duration}")

    return "\n".join(lines)


def format_presets_human(presets: dict[str, dict[str, str]]) -> str:
    """Format the result of HandBrakeCLI.preset_list() for terminal output."""
    lines: list[str] = []
    for category, entries in presets.items():
        lines.append(f"{category}:")
        for name, args in entries.items():
            lines.append(f"  {name}: {args}")
    return "\n".join(lines)

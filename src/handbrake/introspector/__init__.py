"""Introspector module for HandBrakeCLI scan output.

- parse_tree / Node: schema-less parser for the ``+`` indented outline
- parse_scan: full scan output to Disc/Title/Chapter graph
- Formatters: human, JSON and YAML output, plus YAML loading
"""

from handbrake.introspector.formatters import (
    disc_from_dict,
    disc_to_dict,
    format_human,
    format_json,
    format_presets_human,
    format_yaml,
    load_yaml,
)
from handbrake.introspector.parsers import (
    extract_disc,
    parse_chapter,
    parse_disc_name,
    parse_scan,
    parse_title,
)
from handbrake.introspector.tree import Node, parse_tree

__all__ = [
    "Node",
    "parse_tree",
    "extract_disc",
    "parse_chapter",
    "parse_disc_name",
    "parse_scan",
    "parse_title",
    # Formatters
    "disc_from_dict",
    "disc_to_dict",
    "format_human",
    "format_json",
    "format_presets_human",
    "format_yaml",
    "load_yaml",
]

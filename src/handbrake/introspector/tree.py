"""Indentation tree parser for HandBrakeCLI diagnostic output.

HandBrakeCLI ends its scan report with an outline like:

    + title 3:
      + duration: 01:43:54
      + chapters:
        + 1: cells 0->0, 9236 blocks, duration 00:04:09

Each entry starts with ``+`` and every nesting level adds two spaces. This
module turns such text into a tree of Nodes. It knows nothing about titles
or chapters; callers match on node names.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

MARKER = "+"
INDENT = "  "
ROOT_NAME = "__root__"


@dataclass
class Node:
    """One outline entry and the entries nested beneath it."""

    name: str
    children: list[Node] = field(default_factory=list)

    def __getitem__(self, key: int | str) -> Node:
        """Look up a child by position or by exact name.

        Raises:
            IndexError: If an integer position is out of range.
            KeyError: If no child has the given name.
        """
        if isinstance(key, int):
            return self.children[key]
        node = self.child(key)
        if node is None:
            raise KeyError(key)
        return node

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def child(self, name: str) -> Node | None:
        """Return the first child whose name is exactly name."""
        return self.find_child(lambda node: node.name == name)

    def find_child(self, predicate: Callable[[Node], bool]) -> Node | None:
        """Return the first child matching predicate, or None."""
        return next((node for node in self.children if predicate(node)), None)

    def render(self, indent: str = "") -> str:
        """Render this node's children back into outline text."""
        lines: list[str] = []
        for node in self.children:
            lines.append(f"{indent}{MARKER} {node.name}")
            nested = node.render(indent + INDENT)
            if nested:
                lines.append(nested)
        return "\n".join(lines)


def parse_tree(text: str) -> Node:
    """Parse ``+``-marked outline text into a tree.

    Lines that do not start with the marker (after leading whitespace) are
    ignored, so the log lines HandBrakeCLI prints before the outline do no
    harm. Text without any top-level entries gives an empty root.

    Args:
        text: Raw HandBrakeCLI output.

    Returns:
        A synthetic root Node whose children are the top-level entries.
    """
    lines = [line for line in text.splitlines() if line.lstrip().startswith(MARKER)]
    blocks = _split_blocks(lines, "")
    return Node(ROOT_NAME, [_read_node(block, "") for block in blocks])


def _split_blocks(lines: list[str], indent: str) -> list[list[str]]:
    """Group lines into blocks each starting with a marker at indent.

    Deeper lines before the first marker at this level have no parent and
    are dropped.
    """
    prefix = indent + MARKER
    blocks: list[list[str]] = []
    for line in lines:
        if line.startswith(prefix):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return blocks


def _read_node(block: list[str], indent: str) -> Node:
    name = block[0][len(indent) + len(MARKER) :]
    if name.startswith(" "):
        name = name[1:]
    child_indent = indent + INDENT
    children = [
        _read_node(child, child_indent)
        for child in _split_blocks(block[1:], child_indent)
    ]
    return Node(name, children)

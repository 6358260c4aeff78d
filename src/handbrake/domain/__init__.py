"""Domain models for HandBrakeCLI scan results.

Usage:
    from handbrake.domain import Disc, Title, Chapter
"""

from .models import Chapter, Disc, Title

__all__ = [
    "Chapter",
    "Disc",
    "Title",
]

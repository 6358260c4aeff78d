"""Duration utilities.

HandBrakeCLI reports title and chapter lengths as "hh:mm:ss" strings. These
helpers convert between that form and integer seconds.
"""


def parse_duration_seconds(duration: str) -> int:
    """Convert a colon-separated duration into seconds.

    Any number of parts is accepted, most significant first, so "1:02:42",
    "01:02:42" and "62:42" all give 3762.

    Args:
        duration: Duration string (e.g., "01:43:54").

    Returns:
        Total number of seconds.

    Raises:
        ValueError: If any part is not a non-negative integer.
    """
    parts = duration.strip().split(":")
    seconds = 0
    for part in parts:
        if not part.isdigit():
            raise ValueError(f"Invalid duration: {duration!r}")
        seconds = seconds * 60 + int(part)
    return seconds


def format_seconds(seconds: int) -> str:
    """Format a number of seconds as "hh:mm:ss".

    Args:
        seconds: Non-negative number of seconds.

    Returns:
        Zero-padded duration string.
    """
    if seconds < 0:
        raise ValueError(f"Duration cannot be negative: {seconds}")
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

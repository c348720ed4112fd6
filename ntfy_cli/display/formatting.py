"""Terminal formatting primitives."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
WHITE = "\x1b[37m"
GRAY = "\x1b[90m"

MINUTE = 60
HOUR = 3600
DAY = 86400

PRIORITY_LABELS = {1: "min", 2: "low", 4: "high", 5: "urgent"}
PRIORITY_COLORS = {1: GRAY, 2: CYAN, 3: WHITE, 4: YELLOW, 5: RED}


@dataclass(frozen=True)
class Formatter:
    """
    Output settings threaded into every renderer.

    Args:
        no_color: Strip ANSI styling.
        quiet: Suppress headers and decoration.
    """

    no_color: bool = False
    quiet: bool = False

    @classmethod
    def from_env(
        cls,
        no_color: bool = False,
        quiet: bool = False,
        stream: TextIO | None = None,
    ) -> Formatter:
        """
        Build settings from flags, NO_COLOR and terminal detection.

        Args:
            no_color: Value of the --no-color flag.
            quiet: Value of the --quiet flag.
            stream: Output stream checked for TTY support.

        Returns:
            Formatter instance.
        """
        is_tty = bool(stream is not None and stream.isatty())
        disabled = no_color or "NO_COLOR" in os.environ or not is_tty
        return cls(no_color=disabled, quiet=quiet)

    def style(self, code: str, text: str) -> str:
        """
        Wrap text in an ANSI style unless colors are disabled.

        Args:
            code: ANSI escape sequence.
            text: Text to style.

        Returns:
            Styled text.
        """
        if self.no_color or not text:
            return text
        return f"{code}{text}{RESET}"

    def priority_badge(self, priority: int | None) -> str:
        """
        Render a priority badge such as "[urgent]".

        Args:
            priority: Message priority.

        Returns:
            Badge text, empty for the default priority.
        """
        if priority is None or priority == 3:
            return ""
        label = PRIORITY_LABELS.get(priority, f"p{priority}")
        color = PRIORITY_COLORS.get(priority, WHITE)
        return self.style(color, f"[{label}]")

    def format_tags(self, tags: list[str] | None) -> str:
        """
        Render tags as "#tag1 #tag2".

        Args:
            tags: Tag list.

        Returns:
            Dimmed tag text, empty when there are no tags.
        """
        if not tags:
            return ""
        return self.style(DIM, " ".join(f"#{tag}" for tag in tags))

    def separator(self) -> str:
        """Return a dimmed horizontal rule."""
        return self.style(DIM, "─" * 60)


def relative_time(unix: int, now: float | None = None) -> str:
    """
    Describe how long ago a timestamp was.

    Args:
        unix: Unix timestamp in seconds.
        now: Reference time, defaults to the current time.

    Returns:
        Label such as "just now", "2m ago" or "yesterday".
    """
    current = int(time.time() if now is None else now)
    diff = current - unix
    if diff < 10:
        return "just now"
    if diff < MINUTE:
        return f"{diff}s ago"
    if diff < HOUR:
        return f"{diff // MINUTE}m ago"
    if diff < DAY:
        return f"{diff // HOUR}h ago"
    if diff < DAY * 2:
        return "yesterday"
    return f"{diff // DAY}d ago"


def format_time(unix: int, now: float | None = None) -> str:
    """
    Format a timestamp as "YYYY-MM-DD HH:MM (relative)".

    Args:
        unix: Unix timestamp in seconds.
        now: Reference time for the relative label.

    Returns:
        Formatted local time.
    """
    try:
        stamp = datetime.fromtimestamp(unix).strftime("%Y-%m-%d %H:%M")
    except (ValueError, OverflowError, OSError):
        stamp = str(unix)
    return f"{stamp} ({relative_time(unix, now)})"


def format_time_short(unix: int) -> str:
    """
    Format a timestamp as local "HH:MM".

    Args:
        unix: Unix timestamp in seconds.

    Returns:
        Formatted local time, or the raw timestamp when it is out of range.
    """
    try:
        return datetime.fromtimestamp(unix).strftime("%H:%M")
    except (ValueError, OverflowError, OSError):
        return str(unix)


def format_duration(seconds: float) -> str:
    """
    Format an elapsed duration as "3m 12s" or "45s".

    Args:
        seconds: Elapsed seconds.

    Returns:
        Duration label.
    """
    total = max(0, int(seconds))
    minutes, secs = divmod(total, MINUTE)
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"

"""Terminal display utilities."""

from ntfy_cli.display.formatting import (
    Formatter,
    format_duration,
    format_time,
    format_time_short,
    relative_time,
)
from ntfy_cli.display.render import (
    render_messages,
    render_unread_summary,
    render_watch_banner,
    render_watch_message,
    render_watch_summary,
)

__all__ = [
    "Formatter",
    "format_time",
    "format_time_short",
    "format_duration",
    "relative_time",
    "render_messages",
    "render_unread_summary",
    "render_watch_banner",
    "render_watch_message",
    "render_watch_summary",
]

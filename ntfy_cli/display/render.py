"""Message and session rendering helpers."""

from __future__ import annotations

from collections.abc import Sequence

from ntfy_cli.client.models import Message
from ntfy_cli.display.formatting import (
    BOLD,
    CYAN,
    DIM,
    GREEN,
    MAGENTA,
    YELLOW,
    Formatter,
    format_duration,
    format_time,
    format_time_short,
)
from ntfy_cli.shared.constants import (
    MAX_PREVIEWS_PER_TOPIC,
    MESSAGE_ID_DISPLAY_LENGTH,
    PREVIEW_LENGTH,
)
from ntfy_cli.shared.converters import pluralize, truncate_text
from ntfy_cli.watch.models import SessionStats


def render_messages(
    messages: Sequence[Message],
    topic: str,
    fmt: Formatter,
    now: float | None = None,
) -> str:
    """
    Render a topic's messages as a list.

    Args:
        messages: Messages to render.
        topic: Topic label.
        fmt: Output settings.
        now: Reference time for relative labels.

    Returns:
        Rendered text ending with a newline, or empty in quiet mode with no
        messages.
    """
    if fmt.quiet:
        return "".join(f"{message.message or ''}\n" for message in messages)
    if not messages:
        return fmt.style(DIM, f"No messages found for topic {topic}") + "\n"

    lines = [
        "",
        f"{fmt.style(BOLD + CYAN, topic)} "
        f"{fmt.style(DIM, '(' + pluralize(len(messages), 'message') + ')')}",
        fmt.separator(),
    ]
    for message in messages:
        header = [
            fmt.style(DIM, message.id[:MESSAGE_ID_DISPLAY_LENGTH]),
            fmt.style(DIM, format_time(message.time, now)),
            fmt.priority_badge(message.priority),
            fmt.format_tags(message.tags),
        ]
        lines.append("  ".join(part for part in header if part))
        if message.title:
            lines.append(fmt.style(BOLD, message.title))
        lines.append(message.message or fmt.style(DIM, "(no message body)"))
        if message.click:
            lines.append(fmt.style(MAGENTA, message.click))
        lines.append(fmt.separator())
    return "\n".join(lines) + "\n"


def render_unread_summary(
    results: Sequence[tuple[str, Sequence[Message]]],
    since_label: str,
    fmt: Formatter,
) -> str:
    """
    Render unread messages grouped by topic.

    Args:
        results: Topic and unread messages pairs.
        since_label: Human readable lower bound such as "1h" or "last read".
        fmt: Output settings.

    Returns:
        Rendered summary.
    """
    total = sum(len(messages) for _, messages in results)
    if fmt.quiet:
        return f"{total}\n"

    lines = [
        "",
        f"{fmt.style(BOLD, 'Unread messages')} {fmt.style(DIM, f'since {since_label}')}"
        f" - {fmt.style(GREEN, f'{total} total')}",
        "",
    ]
    for topic, messages in results:
        if not messages:
            lines.append(f"  {fmt.style(CYAN, topic)}  {fmt.style(DIM, 'no new messages')}")
            lines.append("")
            continue
        lines.append(
            f"  {fmt.style(BOLD + CYAN, topic)}  "
            f"{fmt.style(YELLOW, pluralize(len(messages), 'message'))}"
        )
        for message in list(messages)[-MAX_PREVIEWS_PER_TOPIC:]:
            if message.title:
                preview = fmt.style(BOLD, message.title)
            else:
                preview = truncate_text(message.message, PREVIEW_LENGTH)
            parts = [
                fmt.style(DIM, format_time_short(message.time)),
                fmt.priority_badge(message.priority),
                preview,
            ]
            lines.append("    " + "  ".join(part for part in parts if part))
        if len(messages) > MAX_PREVIEWS_PER_TOPIC:
            remaining = len(messages) - MAX_PREVIEWS_PER_TOPIC
            lines.append(f"    {fmt.style(DIM, f'… and {remaining} more')}")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_watch_banner(
    topics: Sequence[str],
    interval_seconds: float,
    sound_label: str,
    fmt: Formatter,
) -> str:
    """
    Render the watch session startup banner.

    Args:
        topics: Watched topics.
        interval_seconds: Polling interval.
        sound_label: Sound path, or "disabled".
        fmt: Output settings.

    Returns:
        Banner text.
    """
    interval = f"{interval_seconds:g}"
    lines = [
        "",
        f"{fmt.style(BOLD + CYAN, 'ntfy watch')} "
        f"{fmt.style(DIM, f'- polling every {interval}s')}",
        fmt.style(DIM, f"Topics: {', '.join(topics)}"),
        fmt.style(DIM, f"Sound: {sound_label}"),
        "",
        fmt.style(DIM, "Press Ctrl+C to stop and see session summary."),
        "",
    ]
    return "\n".join(lines) + "\n"


def render_watch_message(message: Message, topic: str, fmt: Formatter) -> str:
    """
    Render one message block for watch output.

    Args:
        message: New message.
        topic: Topic the message arrived on.
        fmt: Output settings.

    Returns:
        Message block followed by a blank line; only the body in quiet mode.
    """
    if fmt.quiet:
        return f"{message.message or message.title or ''}\n"
    header = [
        fmt.style(DIM, format_time_short(message.time)),
        fmt.style(CYAN, f"[{topic}]"),
        fmt.priority_badge(message.priority),
        fmt.format_tags(message.tags),
    ]
    lines = [" ".join(part for part in header if part)]
    if message.title:
        lines.append(fmt.style(BOLD, message.title))
    if message.message:
        lines.append(message.message)
    return "\n".join(lines) + "\n\n"


def render_watch_summary(stats: SessionStats, now: float, fmt: Formatter) -> str:
    """
    Render the end-of-session summary.

    Args:
        stats: Session counters.
        now: Session end time.
        fmt: Output settings.

    Returns:
        Summary block.
    """
    lines = [
        "",
        fmt.style(BOLD, "Watch session ended"),
        fmt.style(DIM, f"Duration: {format_duration(stats.elapsed(now))}"),
        fmt.style(DIM, f"Topics watched: {', '.join(stats.topics)}"),
        fmt.style(DIM, f"Messages seen: {stats.total}"),
    ]
    for topic in stats.topics:
        count = stats.counts.get(topic, 0)
        if count > 0:
            noun = "message" if count == 1 else "messages"
            lines.append(
                f"  {fmt.style(CYAN, topic)}: {fmt.style(GREEN, str(count))} {noun}"
            )
    return "\n".join(lines) + "\n"

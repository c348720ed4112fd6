from __future__ import annotations

import io

import pytest

from ntfy_cli.client.models import Message
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
from ntfy_cli.watch.models import SessionStats

PLAIN = Formatter(no_color=True)


@pytest.mark.parametrize(
    ("priority", "badge"),
    [
        (None, ""),
        (3, ""),
        (1, "[min]"),
        (2, "[low]"),
        (4, "[high]"),
        (5, "[urgent]"),
        (7, "[p7]"),
    ],
)
def test_priority_badge(priority: int | None, badge: str) -> None:
    assert PLAIN.priority_badge(priority) == badge


def test_colored_badge_wraps_ansi() -> None:
    assert Formatter().priority_badge(5) == "\x1b[31m[urgent]\x1b[0m"


def test_from_env_disables_color_for_non_tty() -> None:
    assert Formatter.from_env(stream=io.StringIO()).no_color is True
    assert Formatter.from_env(quiet=True, stream=io.StringIO()).quiet is True


@pytest.mark.parametrize(
    ("diff", "label"),
    [
        (3, "just now"),
        (45, "45s ago"),
        (600, "10m ago"),
        (7200, "2h ago"),
        (90000, "yesterday"),
        (3 * 86400, "3d ago"),
    ],
)
def test_relative_time(diff: int, label: str) -> None:
    assert relative_time(1_000_000 - diff, now=1_000_000) == label


def test_format_duration() -> None:
    assert format_duration(45.9) == "45s"
    assert format_duration(192) == "3m 12s"


def test_render_messages_quiet_prints_bodies_only() -> None:
    messages = [
        Message(id="abcdefghij", time=1, message="first", title="T"),
        Message(id="k", time=2, message="second"),
    ]

    assert render_messages(messages, "alerts", Formatter(no_color=True, quiet=True)) == (
        "first\nsecond\n"
    )


def test_render_messages_shows_truncated_id_and_placeholder() -> None:
    messages = [Message(id="abcdefghij", time=1, click="https://example.com")]

    text = render_messages(messages, "alerts", PLAIN, now=100)

    assert "alerts (1 message)" in text
    assert "abcdefgh " in text
    assert "abcdefghi" not in text
    assert "(no message body)" in text
    assert "https://example.com" in text


def test_render_messages_empty_topic() -> None:
    assert render_messages([], "alerts", PLAIN) == "No messages found for topic alerts\n"


def test_unread_summary_limits_previews() -> None:
    messages = [Message(id=str(index), time=index, message=f"m{index}") for index in range(7)]

    text = render_unread_summary([("alerts", messages), ("quiet", [])], "1h", PLAIN)

    assert "7 total" in text
    assert "alerts  7 messages" in text
    assert "m0" not in text
    assert "m6" in text
    assert "and 2 more" in text
    assert "quiet  no new messages" in text


def test_unread_summary_quiet_prints_total() -> None:
    messages = [Message(id="a", time=1, message="x")]

    text = render_unread_summary([("alerts", messages)], "1h", Formatter(quiet=True))

    assert text == "1\n"


def test_watch_banner_lists_topics_and_sound() -> None:
    text = render_watch_banner(["a", "b"], 30, "disabled", PLAIN)

    assert "ntfy watch - polling every 30s" in text
    assert "Topics: a, b" in text
    assert "Sound: disabled" in text
    assert "Ctrl+C" in text


def test_watch_summary_lists_only_active_topics() -> None:
    stats = SessionStats(started_at=0, topics=("a", "b", "c"), counts={"a": 2, "b": 0, "c": 1})

    text = render_watch_summary(stats, now=75, fmt=PLAIN)

    assert text.splitlines() == [
        "",
        "Watch session ended",
        "Duration: 1m 15s",
        "Topics watched: a, b, c",
        "Messages seen: 3",
        "  a: 2 messages",
        "  c: 1 message",
    ]


def test_out_of_range_timestamps_fall_back_to_raw_value() -> None:
    assert format_time_short(10**13) == "10000000000000"
    assert format_time(10**13, now=1_000_000).startswith("10000000000000 (")


def test_watch_message_quiet_prints_body_only() -> None:
    message = Message(id="a", time=1, message="hi", title="T", tags=["tada"])

    assert render_watch_message(message, "alerts", Formatter(quiet=True)) == "hi\n"
    titled = Message(id="b", time=1, title="Only title")
    assert render_watch_message(titled, "alerts", Formatter(quiet=True)) == "Only title\n"

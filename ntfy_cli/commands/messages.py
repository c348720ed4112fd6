"""Message listing commands: messages, all and unread."""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from ntfy_cli.client.models import Message
from ntfy_cli.client.ntfy import NtfyClient
from ntfy_cli.commands.common import (
    build_client,
    build_formatter,
    load_profile,
    print_json,
)
from ntfy_cli.config.models import ServerProfile
from ntfy_cli.display.render import render_messages, render_unread_summary
from ntfy_cli.shared.constants import ALL_TOPIC_ALIAS, DEFAULT_SINCE
from ntfy_cli.shared.errors import UsageError
from ntfy_cli.state.store import get_last_read_time, load_state


def run_messages(args: argparse.Namespace) -> int:
    """
    Fetch and display messages for one topic.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    _, profile = load_profile(args)
    topic = args.topic or profile.default_topic
    return asyncio.run(_show_messages(args, profile, topic))


def run_all(args: argparse.Namespace) -> int:
    """
    Display messages for the catch-all topic.

    Uses FAST-all when it is watched, otherwise the first watched topic.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    _, profile = load_profile(args)
    if ALL_TOPIC_ALIAS in profile.topics:
        topic = ALL_TOPIC_ALIAS
    elif profile.topics:
        topic = profile.topics[0]
    else:
        topic = profile.default_topic
    return asyncio.run(_show_messages(args, profile, topic))


async def _show_messages(
    args: argparse.Namespace,
    profile: ServerProfile,
    topic: str,
) -> int:
    since = args.since or DEFAULT_SINCE
    async with build_client(profile) as client:
        messages = await client.fetch_messages(topic, since)
    if args.json:
        print_json([message.model_dump(exclude_none=True) for message in messages])
    else:
        print(render_messages(messages, topic, build_formatter(args)), end="")
    return 0


async def collect_unread(
    client: NtfyClient,
    profile_name: str,
    topics: list[str],
    state: dict[str, Any],
    since: str | None = None,
) -> list[tuple[str, list[Message]]]:
    """
    Fetch unread messages for several topics concurrently.

    Args:
        client: API client.
        profile_name: Profile name for read-state lookups.
        topics: Topics to check.
        state: Read-state dictionary.
        since: Explicit lower bound overriding the last-read time.

    Returns:
        Topic and unread messages pairs in input order.
    """

    async def fetch_topic(topic: str) -> tuple[str, list[Message]]:
        last_read = get_last_read_time(state, profile_name, topic)
        if since:
            since_param = since
        elif last_read > 0:
            since_param = str(last_read)
        else:
            since_param = DEFAULT_SINCE
        messages = await client.fetch_messages(topic, since_param)
        if last_read > 0:
            messages = [message for message in messages if message.time > last_read]
        return topic, messages

    return list(await asyncio.gather(*(fetch_topic(topic) for topic in topics)))


def run_unread(args: argparse.Namespace) -> int:
    """
    Show unread messages across watched topics.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    profile_name, profile = load_profile(args)
    topics = [args.topic] if args.topic else list(profile.topics)
    if not topics:
        raise UsageError(
            "No topics configured. Add topics to your profile or use --topic."
        )
    state = load_state()
    return asyncio.run(_show_unread(args, profile_name, profile, topics, state))


async def _show_unread(
    args: argparse.Namespace,
    profile_name: str,
    profile: ServerProfile,
    topics: list[str],
    state: dict[str, Any],
) -> int:
    async with build_client(profile) as client:
        results = await collect_unread(client, profile_name, topics, state, args.since)
    total = sum(len(messages) for _, messages in results)

    if args.total:
        print(total)
        return 0
    if args.count:
        for topic, messages in results:
            print(f"{topic}: {len(messages)}")
        return 0
    if args.json:
        read_times = [get_last_read_time(state, profile_name, topic) for topic in topics]
        print_json(
            {
                "profileName": profile_name,
                "sinceTimestamp": min(read_times) if read_times else 0,
                "total": total,
                "topics": [
                    {
                        "topic": topic,
                        "count": len(messages),
                        "messages": [
                            message.model_dump(exclude_none=True)
                            for message in messages
                        ],
                    }
                    for topic, messages in results
                ],
            }
        )
        return 0

    since_label = args.since or "last read"
    print(render_unread_summary(results, since_label, build_formatter(args)), end="")
    return 0

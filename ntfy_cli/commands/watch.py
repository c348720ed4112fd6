"""Watch command: poll topics and alert on new messages."""

from __future__ import annotations

import argparse
import asyncio
import logging

from ntfy_cli.commands.common import build_client, build_formatter, load_profile
from ntfy_cli.config.topics import resolve_watch_topics
from ntfy_cli.shared.constants import (
    DEFAULT_PRIORITY_THRESHOLD,
    DEFAULT_WATCH_INTERVAL_SECONDS,
)
from ntfy_cli.shared.converters import parse_priority, to_int
from ntfy_cli.shared.errors import UsageError
from ntfy_cli.state.store import load_state, save_state, set_last_read_time
from ntfy_cli.watch.audio import AudioPlayer, default_sound_path
from ntfy_cli.watch.cancel import CancelToken, cancel_on_signals
from ntfy_cli.watch.engine import WatchEngine
from ntfy_cli.watch.models import WatchSettings

logger = logging.getLogger(__name__)


def build_watch_settings(args: argparse.Namespace, topics: list[str]) -> WatchSettings:
    """
    Build session settings from CLI arguments.

    Args:
        args: Parsed CLI arguments.
        topics: Resolved topics to poll.

    Returns:
        Validated watch settings.

    Raises:
        UsageError: Interval or priority is invalid.
    """
    interval = DEFAULT_WATCH_INTERVAL_SECONDS
    if args.interval is not None:
        interval = to_int(args.interval)
        if interval is None or interval <= 0:
            raise UsageError(
                f'Invalid interval "{args.interval}". Use a positive number of seconds.'
            )

    threshold = DEFAULT_PRIORITY_THRESHOLD
    if args.priority is not None:
        parsed = parse_priority(args.priority)
        if parsed is None:
            raise UsageError(
                f'Invalid priority "{args.priority}". '
                "Use 1-5 or min, low, default, high, urgent."
            )
        threshold = parsed

    return WatchSettings(
        topics=tuple(topics),
        sound_path=args.sound or default_sound_path(),
        interval_seconds=interval,
        no_sound=bool(args.no_sound),
        device=args.device,
        priority_threshold=threshold,
    )


def run_watch(args: argparse.Namespace) -> int:
    """
    Run a watch session until interrupted.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code; an interrupted session is a success.
    """
    if args.topic and args.group:
        raise UsageError("Use either --topic or --group, not both")
    profile_name, profile = load_profile(args)
    topics = resolve_watch_topics(profile, args.topic, args.group)
    settings = build_watch_settings(args, topics)
    formatter = build_formatter(args)

    def save_read_time(topic: str, cursor: int) -> None:
        state = load_state()
        save_state(set_last_read_time(state, profile_name, topic, cursor))

    async def record_read(topic: str, cursor: int) -> None:
        await asyncio.to_thread(save_read_time, topic, cursor)

    async def watch() -> None:
        token = CancelToken()
        async with build_client(profile) as client:
            with cancel_on_signals(token):
                engine = WatchEngine(
                    settings,
                    fetch=client.fetch_messages,
                    player=AudioPlayer(),
                    token=token,
                    formatter=formatter,
                    on_advance=record_read,
                )
                stats = await engine.run()
        logger.debug("Watch session ended after %s message(s)", stats.total)

    asyncio.run(watch())
    return 0

"""Mark topics as read."""

from __future__ import annotations

import argparse
import time

from ntfy_cli.commands.common import load_profile, print_json
from ntfy_cli.config.profiles import load_config
from ntfy_cli.shared.errors import ConfigError, UsageError
from ntfy_cli.state.store import load_state, save_state, set_last_read_time


def collect_read_targets(args: argparse.Namespace) -> list[tuple[str, str]]:
    """
    Resolve the profile and topic pairs to mark as read.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Profile name and topic pairs.

    Raises:
        UsageError: Nothing to mark.
    """
    if args.all:
        config = load_config()
        if config is None or not config.profiles:
            raise ConfigError("No profiles configured.")
        targets = [
            (name, topic)
            for name, profile in config.profiles.items()
            for topic in profile.topics
        ]
    else:
        profile_name, profile = load_profile(args)
        topics = [args.topic] if args.topic else list(profile.topics)
        targets = [(profile_name, topic) for topic in topics]
    if not targets:
        raise UsageError("No topics to mark as read.")
    return targets


def run_read(args: argparse.Namespace) -> int:
    """
    Mark topics as read up to now.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    targets = collect_read_targets(args)
    now = int(time.time())
    state = load_state()
    for profile_name, topic in targets:
        state = set_last_read_time(state, profile_name, topic, now)
    save_state(state)

    if args.json:
        print_json(
            {
                "lastReadTime": now,
                "marked": [
                    {"profile": profile_name, "topic": topic}
                    for profile_name, topic in targets
                ],
            }
        )
    else:
        labels = [
            topic if not args.all else f"{profile_name}/{topic}"
            for profile_name, topic in targets
        ]
        print(f"Marked as read: {', '.join(labels)}")
    return 0

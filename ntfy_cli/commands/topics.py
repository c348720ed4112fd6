"""Watched-topic and topic-group commands."""

from __future__ import annotations

import argparse

from ntfy_cli.commands.common import print_json
from ntfy_cli.config.models import AppConfig, ServerProfile
from ntfy_cli.config.profiles import load_config, save_config
from ntfy_cli.config.topics import add_group, add_topic, remove_group, remove_topic
from ntfy_cli.shared.errors import ConfigError


def load_editable_profile(
    args: argparse.Namespace,
) -> tuple[AppConfig, str, ServerProfile]:
    """
    Load the configured profile that topic commands modify.

    Environment-only profiles cannot be edited, so a config file is required.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Loaded config, profile name and the profile inside the config.

    Raises:
        ConfigError: No matching profile exists in the config file.
    """
    config = load_config()
    if config is None or not config.profiles:
        raise ConfigError(
            "No profiles configured. Run: ntfy config add <name> ... first."
        )
    name = args.server or config.active_profile
    profile = config.profiles.get(name)
    if profile is None:
        raise ConfigError(f'Profile "{name}" not found')
    return config, name, profile


def run_topics_list(args: argparse.Namespace) -> int:
    """List watched topics, marking the default topic."""
    _, _, profile = load_editable_profile(args)
    if args.json:
        print_json({"defaultTopic": profile.default_topic, "topics": profile.topics})
        return 0
    if not profile.topics:
        print("No topics watched.")
        return 0
    for topic in profile.topics:
        suffix = " (default)" if topic == profile.default_topic else ""
        print(f"{topic}{suffix}")
    return 0


def run_topics_add(args: argparse.Namespace) -> int:
    """Add a topic to the watch list."""
    config, _, profile = load_editable_profile(args)
    if not add_topic(profile, args.topic):
        print(f'Topic "{args.topic}" is already watched')
        return 0
    save_config(config)
    print(f'Added topic "{args.topic}"')
    return 0


def run_topics_remove(args: argparse.Namespace) -> int:
    """Remove a topic from the watch list and from every group."""
    config, _, profile = load_editable_profile(args)
    remove_topic(profile, args.topic)
    save_config(config)
    print(f'Removed topic "{args.topic}"')
    return 0


def run_groups_list(args: argparse.Namespace) -> int:
    """List topic groups."""
    _, _, profile = load_editable_profile(args)
    if args.json:
        print_json(profile.topic_groups)
        return 0
    if not profile.topic_groups:
        print("No topic groups defined.")
        return 0
    for name, members in profile.topic_groups.items():
        print(f"{name}: {', '.join(members)}")
    return 0


def run_groups_add(args: argparse.Namespace) -> int:
    """Create or replace a topic group."""
    config, _, profile = load_editable_profile(args)
    add_group(profile, args.name, args.topics)
    save_config(config)
    members = profile.topic_groups[args.name.strip()]
    print(f'Saved group "{args.name}": {", ".join(members)}')
    return 0


def run_groups_remove(args: argparse.Namespace) -> int:
    """Delete a topic group."""
    config, _, profile = load_editable_profile(args)
    remove_group(profile, args.name)
    save_config(config)
    print(f'Removed group "{args.name}"')
    return 0

"""Profile management commands under `ntfy config`."""

from __future__ import annotations

import argparse

from ntfy_cli.commands.common import print_json
from ntfy_cli.config.models import AppConfig, ServerProfile
from ntfy_cli.config.profiles import load_config, save_config, validate_profile
from ntfy_cli.shared.errors import ConfigError, UsageError

PASSWORD_MASK = "***"


def _require_config() -> AppConfig:
    config = load_config()
    if config is None or not config.profiles:
        raise ConfigError("No profiles configured. Run: ntfy config add <name> ...")
    return config


def run_config_add(args: argparse.Namespace) -> int:
    """
    Add or replace a profile.

    The first profile added becomes the active one.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    errors = validate_profile(args.url, args.user, args.password, args.topic)
    if errors:
        raise UsageError("; ".join(errors))

    config = load_config() or AppConfig(active_profile="")
    existing = config.profiles.get(args.name)
    topic = args.topic.strip()
    profile = ServerProfile(
        url=args.url.strip().rstrip("/"),
        user=args.user.strip(),
        password=args.password,
        default_topic=topic,
        topics=list(existing.topics) if existing else [],
        topic_groups=dict(existing.topic_groups) if existing else {},
        skip_ssl_verification=bool(args.skip_ssl_verification),
    )
    if topic not in profile.topics:
        profile.topics.insert(0, topic)
    config.profiles[args.name] = profile
    if not config.active_profile or config.active_profile not in config.profiles:
        config.active_profile = args.name
    save_config(config)

    verb = "Updated" if existing else "Added"
    print(f'{verb} profile "{args.name}"')
    if config.active_profile == args.name:
        print(f'Active profile: "{args.name}"')
    return 0


def run_config_remove(args: argparse.Namespace) -> int:
    """
    Remove a profile, switching the active one if needed.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    config = _require_config()
    if args.name not in config.profiles:
        raise UsageError(f'Profile "{args.name}" not found')
    del config.profiles[args.name]
    if config.active_profile == args.name:
        config.active_profile = next(iter(config.profiles), "")
    save_config(config)

    print(f'Removed profile "{args.name}"')
    if config.active_profile:
        print(f'Active profile: "{config.active_profile}"')
    return 0


def run_config_list(args: argparse.Namespace) -> int:
    """
    List profiles and mark the active one.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    config = load_config()
    if config is None or not config.profiles:
        if args.json:
            print_json({"activeProfile": None, "profiles": []})
        else:
            print("No profiles configured.")
        return 0

    if args.json:
        print_json(
            {
                "activeProfile": config.active_profile,
                "profiles": [
                    {"name": name, "url": profile.url, "user": profile.user}
                    for name, profile in config.profiles.items()
                ],
            }
        )
        return 0

    for name, profile in config.profiles.items():
        marker = "*" if name == config.active_profile else " "
        print(f"{marker} {name}  {profile.url}  ({profile.user or 'anonymous'})")
    return 0


def run_config_use(args: argparse.Namespace) -> int:
    """
    Switch the active profile.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    config = _require_config()
    if args.name not in config.profiles:
        names = ", ".join(config.profiles)
        raise UsageError(f'Profile "{args.name}" not found. Available profiles: {names}')
    config.active_profile = args.name
    save_config(config)
    print(f'Active profile: "{args.name}"')
    return 0


def run_config_show(args: argparse.Namespace) -> int:
    """
    Show the active profile with the password masked.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    config = _require_config()
    name = args.server or config.active_profile
    profile = config.profiles.get(name)
    if profile is None:
        raise ConfigError(f'Profile "{name}" not found')

    payload = profile.to_dict()
    if payload["password"]:
        payload["password"] = PASSWORD_MASK
    if args.json:
        print_json({"name": name, **payload})
        return 0

    print(f"Profile: {name}")
    print(f"  URL:           {profile.url}")
    print(f"  User:          {profile.user}")
    print(f"  Password:      {payload['password']}")
    print(f"  Default topic: {profile.default_topic}")
    print(f"  Topics:        {', '.join(profile.topics) or '(none)'}")
    for group_name, members in profile.topic_groups.items():
        print(f"  Group {group_name}: {', '.join(members)}")
    if profile.skip_ssl_verification:
        print("  TLS verification: disabled")
    return 0

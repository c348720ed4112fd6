"""Profile configuration utilities."""

from ntfy_cli.config.models import AppConfig, ServerProfile
from ntfy_cli.config.profiles import (
    get_active_profile,
    load_config,
    load_env_file,
    parse_profile,
    profile_from_env,
    resolve_profile,
    save_config,
    validate_profile,
)
from ntfy_cli.config.topics import (
    add_group,
    add_topic,
    remove_group,
    remove_topic,
    resolve_watch_topics,
)

__all__ = [
    "AppConfig",
    "ServerProfile",
    "load_config",
    "load_env_file",
    "save_config",
    "parse_profile",
    "get_active_profile",
    "validate_profile",
    "profile_from_env",
    "resolve_profile",
    "add_topic",
    "remove_topic",
    "add_group",
    "remove_group",
    "resolve_watch_topics",
]

"""Profile loading, validation and resolution."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from dotenv import dotenv_values

from ntfy_cli.config.models import AppConfig, ServerProfile
from ntfy_cli.shared.constants import (
    CONFIG_FILE_MODE,
    ENV_DEFAULT_TOPIC,
    ENV_PASSWORD,
    ENV_PREFIX,
    ENV_TOPIC,
    ENV_URL,
    ENV_USER,
    FALLBACK_PROFILE_NAME,
)
from ntfy_cli.shared.converters import to_string_list, to_text
from ntfy_cli.shared.errors import ConfigError
from ntfy_cli.shared.paths import config_path, env_file_path
from ntfy_cli.shared.storage import load_json, save_json_atomic

logger = logging.getLogger(__name__)


def parse_profile(name: str, item: dict[str, Any]) -> ServerProfile:
    """
    Parse one profile from JSON payload.

    Args:
        name: Profile name, used in error messages.
        item: Profile object.

    Returns:
        Parsed profile.
    """
    url = to_text(item.get("url"))
    if not url:
        raise ConfigError(f"Profile {name!r} is missing url")

    default_topic = to_text(item.get("defaultTopic"))
    topics = to_string_list(item.get("topics"))
    if not default_topic and topics:
        default_topic = topics[0]

    raw_groups = item.get("topicGroups")
    if not isinstance(raw_groups, dict):
        raw_groups = {}
    topic_groups: dict[str, list[str]] = {}
    for group_name, members in raw_groups.items():
        group_key = to_text(group_name)
        if group_key:
            topic_groups[group_key] = to_string_list(members)

    return ServerProfile(
        url=url,
        user=to_text(item.get("user")),
        password=to_text(item.get("password")),
        default_topic=default_topic,
        topics=topics,
        topic_groups=topic_groups,
        skip_ssl_verification=item.get("skipSSLVerification") is True,
    )


def load_config() -> AppConfig | None:
    """
    Load profile configuration from the config directory.

    Returns:
        Parsed configuration, or None when no usable config file exists.
    """
    path = config_path()
    try:
        payload = load_json(path, None)
    except (OSError, ValueError) as error:
        logger.warning("Ignoring unreadable config file %s: %s", path, error)
        return None
    if payload is None:
        return None
    if not isinstance(payload, dict):
        logger.warning("Ignoring config file %s: not a JSON object", path)
        return None

    raw_profiles = payload.get("profiles")
    if not isinstance(raw_profiles, dict):
        raw_profiles = {}
    profiles: dict[str, ServerProfile] = {}
    for name, item in raw_profiles.items():
        if not isinstance(item, dict):
            continue
        profiles[str(name)] = parse_profile(str(name), item)

    return AppConfig(
        active_profile=to_text(payload.get("activeProfile")),
        profiles=profiles,
    )


def save_config(config: AppConfig) -> None:
    """
    Write configuration to disk with owner-only permissions.

    Args:
        config: Configuration to persist.

    Returns:
        None.
    """
    save_json_atomic(config_path(), config.to_dict(), mode=CONFIG_FILE_MODE)


def get_active_profile(config: AppConfig) -> ServerProfile:
    """
    Return the active profile.

    Args:
        config: Loaded configuration.

    Returns:
        Active profile.

    Raises:
        ConfigError: Active profile is not defined.
    """
    profile = config.profiles.get(config.active_profile)
    if profile is None:
        raise ConfigError(
            f'Active profile "{config.active_profile}" not found in config. '
            "Run: ntfy config list"
        )
    return profile


def validate_profile(
    url: str | None,
    user: str | None,
    password: str | None,
    default_topic: str | None,
) -> list[str]:
    """
    Validate profile fields.

    Args:
        url: Server URL.
        user: Username.
        password: Password.
        default_topic: Default topic.

    Returns:
        Error strings, empty when the profile is valid.
    """
    errors: list[str] = []
    url_text = to_text(url)
    if not url_text:
        errors.append("url is required")
    else:
        parsed = urlparse(url_text)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            errors.append(f'url "{url_text}" is not a valid URL')
    if not to_text(user):
        errors.append("user is required")
    if not to_text(password):
        errors.append("password is required")
    if not to_text(default_topic):
        errors.append("defaultTopic is required")
    return errors


def load_env_file(
    path: Path | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> list[str]:
    """
    Import NTFY_* variables from a dotenv file, keeping values already set.

    Args:
        path: Dotenv file, defaults to ~/.claude/.env.
        environ: Environment to update, defaults to os.environ.

    Returns:
        Names of the variables that were set.
    """
    path = path or env_file_path()
    environ = os.environ if environ is None else environ
    if not path.is_file():
        return []
    try:
        values = dotenv_values(path)
    except (OSError, ValueError) as error:
        logger.warning("Ignoring unreadable env file %s: %s", path, error)
        return []

    loaded: list[str] = []
    for key, value in values.items():
        if not key.startswith(ENV_PREFIX) or value is None or key in environ:
            continue
        environ[key] = value
        loaded.append(key)
    if loaded:
        logger.debug("Loaded %s from %s", ", ".join(loaded), path)
    return loaded


def profile_from_env() -> ServerProfile | None:
    """
    Build a profile from NTFY_* environment variables.

    Returns:
        Profile, or None when NTFY_URL is unset.
    """
    url = os.environ.get(ENV_URL, "").strip()
    if not url:
        return None
    topic = os.environ.get(ENV_TOPIC, "").strip() or ENV_DEFAULT_TOPIC
    return ServerProfile(
        url=url,
        user=os.environ.get(ENV_USER, ""),
        password=os.environ.get(ENV_PASSWORD, ""),
        default_topic=topic,
        topics=[topic],
    )


def resolve_profile(
    config: AppConfig | None,
    server_override: str | None = None,
) -> tuple[str, ServerProfile]:
    """
    Resolve the profile a command should use.

    Precedence is the --server name, then the config's active profile, then
    NTFY_* environment variables.

    Args:
        config: Loaded configuration, if any.
        server_override: Profile name given with --server.

    Returns:
        Profile name used for read-state keys, and the profile.

    Raises:
        ConfigError: No profile can be resolved.
    """
    if server_override is not None:
        if config is None:
            raise ConfigError(
                f'--server "{server_override}" specified but no config file found. '
                "Run: ntfy config add <name> --url ... to create a profile."
            )
        profile = config.profiles.get(server_override)
        if profile is None:
            names = ", ".join(config.profiles) or "(none)"
            raise ConfigError(
                f'Profile "{server_override}" not found. Available profiles: {names}'
            )
        return server_override, profile

    if config is not None and config.active_profile in config.profiles:
        return config.active_profile, config.profiles[config.active_profile]

    env_profile = profile_from_env()
    if env_profile is not None:
        name = FALLBACK_PROFILE_NAME
        if config is not None and config.active_profile:
            name = config.active_profile
        return name, env_profile

    raise ConfigError(
        "No profile configured. Options:\n"
        "  1. Run: ntfy config add <name> --url <url> --user <user> "
        "--password <pass> --topic <topic>\n"
        "  2. Set environment variables: NTFY_URL, NTFY_USER, NTFY_PASSWORD, "
        "NTFY_TOPIC"
    )

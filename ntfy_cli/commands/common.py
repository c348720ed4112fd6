"""Helpers shared by command implementations."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ntfy_cli.client.ntfy import NtfyClient
from ntfy_cli.config.models import ServerProfile
from ntfy_cli.config.profiles import load_config, resolve_profile
from ntfy_cli.display.formatting import Formatter


def build_formatter(args: argparse.Namespace) -> Formatter:
    """
    Build output settings from global flags.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Formatter for stdout.
    """
    return Formatter.from_env(
        no_color=bool(getattr(args, "no_color", False)),
        quiet=bool(getattr(args, "quiet", False)),
        stream=sys.stdout,
    )


def load_profile(args: argparse.Namespace) -> tuple[str, ServerProfile]:
    """
    Resolve the profile selected by --server, config or environment.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Profile name and profile.
    """
    return resolve_profile(load_config(), getattr(args, "server", None))


def build_client(profile: ServerProfile) -> NtfyClient:
    """
    Create an API client for a profile.

    Args:
        profile: Server profile.

    Returns:
        Client instance; the caller closes it.
    """
    return NtfyClient(
        profile.url,
        profile.user,
        profile.password,
        verify=not profile.skip_ssl_verification,
    )


def print_json(payload: Any) -> None:
    """Print a payload as indented JSON."""
    print(json.dumps(payload, ensure_ascii=False, indent=2))

"""Server health command."""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from ntfy_cli.commands.common import build_client, load_profile, print_json
from ntfy_cli.config.models import ServerProfile
from ntfy_cli.config.profiles import load_config
from ntfy_cli.shared.errors import ConfigError


async def check_profile(name: str, profile: ServerProfile) -> dict[str, Any]:
    """
    Check one profile's server.

    Args:
        name: Profile name.
        profile: Server profile.

    Returns:
        Result with profile, url, healthy, version and optional error.
    """
    result: dict[str, Any] = {"profile": name, "url": profile.url}
    try:
        async with build_client(profile) as client:
            health = await client.check_health()
    except Exception as error:
        result.update({"healthy": False, "version": None, "error": str(error)})
        return result
    result.update({"healthy": health.healthy, "version": health.version})
    return result


async def check_profiles(profiles: dict[str, ServerProfile]) -> list[dict[str, Any]]:
    """
    Check several servers concurrently.

    Args:
        profiles: Profiles keyed by name.

    Returns:
        Results in input order.
    """
    return list(
        await asyncio.gather(
            *(check_profile(name, profile) for name, profile in profiles.items())
        )
    )


def run_health(args: argparse.Namespace) -> int:
    """
    Check server health for the active profile or every profile.

    Args:
        args: Parsed CLI arguments.

    Returns:
        0 when every checked server is healthy, otherwise 1.
    """
    if args.all:
        config = load_config()
        if config is None or not config.profiles:
            raise ConfigError("No profiles configured.")
        profiles = dict(config.profiles)
    else:
        name, profile = load_profile(args)
        profiles = {name: profile}

    results = asyncio.run(check_profiles(profiles))
    all_healthy = all(result["healthy"] for result in results)

    if args.json:
        print_json(results if args.all else results[0])
        return 0 if all_healthy else 1

    for result in results:
        label = f"[{result['profile']}] " if args.all else ""
        if result["healthy"]:
            version = f" v{result['version']}" if result["version"] else ""
            print(f"{label}Server is healthy{version}: {result['url']}")
        else:
            detail = f" ({result['error']})" if result.get("error") else ""
            print(f"{label}Server appears unhealthy: {result['url']}{detail}")
    return 0 if all_healthy else 1

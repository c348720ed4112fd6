"""Publishing commands: send and delete."""

from __future__ import annotations

import argparse
import asyncio

from ntfy_cli.client.models import SendOptions
from ntfy_cli.commands.common import build_client, load_profile, print_json
from ntfy_cli.shared.converters import parse_priority
from ntfy_cli.shared.errors import UsageError


def build_send_options(args: argparse.Namespace) -> SendOptions:
    """
    Build publish options from CLI arguments.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Publish options.

    Raises:
        UsageError: Priority is not a known level.
    """
    priority = None
    if args.priority is not None:
        priority = parse_priority(args.priority)
        if priority is None:
            raise UsageError(
                f'Invalid priority "{args.priority}". '
                "Use 1-5 or min, low, default, high, urgent."
            )
    return SendOptions(
        title=args.title,
        priority=priority,
        tags=args.tags,
        delay=args.delay,
        click=args.click,
        attach=args.attach,
        markdown=args.markdown,
    )


def run_send(args: argparse.Namespace) -> int:
    """
    Send a notification.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    message = " ".join(args.message).strip()
    if not message:
        raise UsageError("message text is required. Usage: ntfy send <message>")
    options = build_send_options(args)
    _, profile = load_profile(args)
    topic = args.topic or profile.default_topic

    async def send() -> int:
        async with build_client(profile) as client:
            result = await client.send_message(topic, message, options)
        if args.json:
            print_json(result.model_dump(exclude_none=True))
        else:
            print(f"Sent: {result.id} to {topic}")
        return 0

    return asyncio.run(send())


def run_delete(args: argparse.Namespace) -> int:
    """
    Delete a message by ID.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    _, profile = load_profile(args)

    async def delete() -> int:
        async with build_client(profile) as client:
            await client.delete_message(args.message_id)
        if args.json:
            print_json({"deleted": args.message_id})
        else:
            print(f"Deleted: {args.message_id}")
        return 0

    return asyncio.run(delete())

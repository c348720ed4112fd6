"""CLI entrypoint for the ntfy command."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from ntfy_cli import __version__
from ntfy_cli.commands.health import run_health
from ntfy_cli.commands.messages import run_all, run_messages, run_unread
from ntfy_cli.commands.profiles import (
    run_config_add,
    run_config_list,
    run_config_remove,
    run_config_show,
    run_config_use,
)
from ntfy_cli.commands.read import run_read
from ntfy_cli.commands.send import run_delete, run_send
from ntfy_cli.commands.topics import (
    run_groups_add,
    run_groups_list,
    run_groups_remove,
    run_topics_add,
    run_topics_list,
    run_topics_remove,
)
from ntfy_cli.commands.watch import run_watch
from ntfy_cli.config.profiles import load_env_file
from ntfy_cli.shared.constants import (
    DEFAULT_SINCE,
    DEFAULT_WATCH_INTERVAL_SECONDS,
    EXIT_RUNTIME_ERROR,
    EXIT_USAGE_ERROR,
)
from ntfy_cli.shared.errors import UsageError
from ntfy_cli.shared.logs import configure_logging

logger = logging.getLogger(__name__)


def add_global_flags(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """
    Add flags accepted before or after the subcommand.

    Args:
        parser: Parser to extend.
        suppress: Leave attributes unset unless given, so subcommand parsers
            do not overwrite values parsed at the top level.

    Returns:
        None.
    """

    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--server",
        type=str,
        default=default(None),
        help="Profile name to use instead of the active profile.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=default(False),
        help="Print machine-readable JSON.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=default(False),
        help="Disable ANSI colors.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=default(False),
        help="Minimal output.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=default(False),
        help="Enable debug logging on stderr.",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build CLI parser.

    Args:
        None.

    Returns:
        Argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="ntfy",
        description="Read, send and watch ntfy notifications",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_global_flags(parser)

    flags = argparse.ArgumentParser(add_help=False)
    add_global_flags(flags, suppress=True)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    messages = commands.add_parser(
        "messages", aliases=["msg"], parents=[flags], help="Show recent messages."
    )
    messages.add_argument("--topic", "-t", type=str, default=None, help="Topic name.")
    messages.add_argument(
        "--since",
        "-s",
        type=str,
        default=None,
        help=f"Time range such as 30m, 2h or a Unix timestamp. Default {DEFAULT_SINCE}.",
    )
    messages.set_defaults(handler=run_messages)

    all_parser = commands.add_parser(
        "all", parents=[flags], help="Show messages from the catch-all topic."
    )
    all_parser.add_argument("--since", "-s", type=str, default=None, help="Time range.")
    all_parser.set_defaults(handler=run_all)

    unread = commands.add_parser(
        "unread", parents=[flags], help="Show messages since topics were last read."
    )
    unread.add_argument("--topic", "-t", type=str, default=None, help="Single topic.")
    unread.add_argument(
        "--since", "-s", type=str, default=None, help="Override the last-read time."
    )
    unread.add_argument("--count", action="store_true", help="Print per-topic counts.")
    unread.add_argument("--total", action="store_true", help="Print the total count.")
    unread.set_defaults(handler=run_unread)

    send = commands.add_parser("send", parents=[flags], help="Send a notification.")
    send.add_argument("message", nargs="*", help="Message text.")
    send.add_argument("--topic", "-t", type=str, default=None, help="Target topic.")
    send.add_argument("--title", type=str, default=None, help="Message title.")
    send.add_argument(
        "--priority", "-p", type=str, default=None, help="Priority 1-5 or name."
    )
    send.add_argument("--tags", type=str, default=None, help="Comma-separated tags.")
    send.add_argument("--delay", type=str, default=None, help="Delivery delay.")
    send.add_argument("--click", type=str, default=None, help="Click URL.")
    send.add_argument("--attach", type=str, default=None, help="Attachment URL.")
    send.add_argument(
        "--markdown", action="store_true", help="Render the body as Markdown."
    )
    send.set_defaults(handler=run_send)

    delete = commands.add_parser("delete", parents=[flags], help="Delete a message.")
    delete.add_argument("message_id", help="Message ID.")
    delete.set_defaults(handler=run_delete)

    read = commands.add_parser("read", parents=[flags], help="Mark topics as read.")
    read_target = read.add_mutually_exclusive_group()
    read_target.add_argument("--topic", "-t", type=str, default=None, help="Single topic.")
    read_target.add_argument(
        "--all", action="store_true", help="Every watched topic of every profile."
    )
    read.set_defaults(handler=run_read)

    health = commands.add_parser("health", parents=[flags], help="Check server health.")
    health.add_argument("--all", action="store_true", help="Check every profile.")
    health.set_defaults(handler=run_health)

    _add_config_commands(commands, flags)
    _add_topic_commands(commands, flags)

    watch = commands.add_parser(
        "watch", parents=[flags], help="Poll topics and play a sound on new messages."
    )
    watch.add_argument("--topic", "-t", type=str, default=None, help="Single topic.")
    watch.add_argument("--group", "-g", type=str, default=None, help="Topic group.")
    watch.add_argument(
        "--interval",
        "-i",
        type=str,
        default=None,
        help=f"Seconds between polls. Default {DEFAULT_WATCH_INTERVAL_SECONDS}.",
    )
    watch.add_argument("--no-sound", action="store_true", help="Disable audio alerts.")
    watch.add_argument("--sound", type=str, default=None, help="Alert sound file.")
    watch.add_argument("--device", type=str, default=None, help="Audio output device.")
    watch.add_argument(
        "--priority",
        "-p",
        type=str,
        default=None,
        help="Minimum priority that plays a sound, 1-5 or name.",
    )
    watch.set_defaults(handler=run_watch)
    return parser


def _add_config_commands(
    commands: argparse._SubParsersAction,
    flags: argparse.ArgumentParser,
) -> None:
    config = commands.add_parser("config", parents=[flags], help="Manage profiles.")
    actions = config.add_subparsers(dest="action", metavar="ACTION", required=True)

    add = actions.add_parser("add", parents=[flags], help="Add or update a profile.")
    add.add_argument("name", help="Profile name.")
    add.add_argument("--url", required=True, help="Server URL.")
    add.add_argument("--user", required=True, help="Username.")
    add.add_argument("--password", required=True, help="Password.")
    add.add_argument("--topic", required=True, help="Default topic.")
    add.add_argument(
        "--skip-ssl-verification",
        action="store_true",
        help="Disable TLS certificate checks.",
    )
    add.set_defaults(handler=run_config_add)

    remove = actions.add_parser(
        "remove", aliases=["rm"], parents=[flags], help="Remove a profile."
    )
    remove.add_argument("name", help="Profile name.")
    remove.set_defaults(handler=run_config_remove)

    listing = actions.add_parser(
        "list", aliases=["ls"], parents=[flags], help="List profiles."
    )
    listing.set_defaults(handler=run_config_list)

    use = actions.add_parser("use", parents=[flags], help="Switch active profile.")
    use.add_argument("name", help="Profile name.")
    use.set_defaults(handler=run_config_use)

    show = actions.add_parser("show", parents=[flags], help="Show the active profile.")
    show.set_defaults(handler=run_config_show)


def _add_topic_commands(
    commands: argparse._SubParsersAction,
    flags: argparse.ArgumentParser,
) -> None:
    topics = commands.add_parser("topics", parents=[flags], help="Manage watched topics.")
    topic_actions = topics.add_subparsers(dest="action", metavar="ACTION", required=True)
    topic_actions.add_parser(
        "list", parents=[flags], help="List watched topics."
    ).set_defaults(handler=run_topics_list)
    topic_add = topic_actions.add_parser("add", parents=[flags], help="Watch a topic.")
    topic_add.add_argument("topic", help="Topic name.")
    topic_add.set_defaults(handler=run_topics_add)
    topic_remove = topic_actions.add_parser(
        "remove", parents=[flags], help="Stop watching a topic."
    )
    topic_remove.add_argument("topic", help="Topic name.")
    topic_remove.set_defaults(handler=run_topics_remove)

    groups = commands.add_parser("groups", parents=[flags], help="Manage topic groups.")
    group_actions = groups.add_subparsers(dest="action", metavar="ACTION", required=True)
    group_actions.add_parser(
        "list", parents=[flags], help="List topic groups."
    ).set_defaults(handler=run_groups_list)
    group_add = group_actions.add_parser(
        "add", parents=[flags], help="Create or replace a group."
    )
    group_add.add_argument("name", help="Group name.")
    group_add.add_argument("topics", nargs="+", help="Member topics.")
    group_add.set_defaults(handler=run_groups_add)
    group_remove = group_actions.add_parser(
        "remove", parents=[flags], help="Delete a group."
    )
    group_remove.add_argument("name", help="Group name.")
    group_remove.set_defaults(handler=run_groups_remove)


def report_error(args: argparse.Namespace, error: Exception) -> None:
    """
    Print a command failure in the selected output mode.

    Args:
        args: Parsed CLI arguments.
        error: Raised exception.

    Returns:
        None.
    """
    message = str(error) or error.__class__.__name__
    if getattr(args, "json", False):
        print(json.dumps({"error": message}, ensure_ascii=False))
    else:
        print(f"Error: {message}", file=sys.stderr)


def run_command(args: argparse.Namespace) -> int:
    """
    Run the selected subcommand and map failures to exit codes.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    try:
        return args.handler(args)
    except UsageError as error:
        report_error(args, error)
        return EXIT_USAGE_ERROR
    except Exception as error:
        logger.debug("Command %s failed", args.command, exc_info=True)
        report_error(args, error)
        return EXIT_RUNTIME_ERROR


def main(argv: list[str] | None = None) -> None:
    """
    Parse CLI arguments and run the selected command.

    Args:
        argv: Arguments without the program name; defaults to sys.argv.

    Returns:
        None.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    load_env_file()
    raise SystemExit(run_command(args))


if __name__ == "__main__":
    main()

"""Logging setup for the command-line entrypoint."""

from __future__ import annotations

import logging
import os
import sys

from ntfy_cli.shared.constants import LOG_FORMAT, LOG_LEVEL_ENV


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging on stderr.

    Args:
        verbose: Force DEBUG level regardless of environment.

    Returns:
        None.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

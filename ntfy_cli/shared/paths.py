"""Config and state path resolution helpers."""

from __future__ import annotations

import os
from pathlib import Path

from ntfy_cli.shared.constants import (
    CONFIG_DIR_ENV,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_DIR,
    ENV_FILE_PARTS,
    STATE_FILE_NAME,
)


def ensure_config_dir() -> Path:
    """
    Resolve the config directory, creating it when missing.

    The NTFY_CONFIG_DIR environment variable overrides the default location.

    Returns:
        Config directory path.
    """
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    config_dir = Path(override).expanduser() if override else DEFAULT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def config_path() -> Path:
    """
    Resolve the profile config file path.

    Returns:
        Path to config.json.
    """
    return ensure_config_dir() / CONFIG_FILE_NAME


def state_path() -> Path:
    """
    Resolve the read-state file path.

    Returns:
        Path to state.json.
    """
    return ensure_config_dir() / STATE_FILE_NAME


def env_file_path() -> Path:
    """
    Resolve the dotenv file that may supply NTFY_* variables.

    Returns:
        Path to ~/.claude/.env.
    """
    return Path.home().joinpath(*ENV_FILE_PARTS)

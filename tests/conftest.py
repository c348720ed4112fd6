from __future__ import annotations

from pathlib import Path

import pytest

from ntfy_cli.shared.constants import (
    CONFIG_DIR_ENV,
    ENV_PASSWORD,
    ENV_TOPIC,
    ENV_URL,
    ENV_USER,
    LOG_LEVEL_ENV,
)


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config, state and dotenv files at a temporary directory."""
    directory = tmp_path / "ntfy-config"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(directory))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in (ENV_URL, ENV_USER, ENV_PASSWORD, ENV_TOPIC, LOG_LEVEL_ENV, "NO_COLOR"):
        # setenv registers the original value for teardown.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return directory

"""Shared constants used across client modules."""

from __future__ import annotations

from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
SOUNDS_DIR = PACKAGE_ROOT / "sounds"
DEFAULT_SOUND_FILE = "ping.wav"

CONFIG_DIR_ENV = "NTFY_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "ntfy-cli"
CONFIG_FILE_NAME = "config.json"
STATE_FILE_NAME = "state.json"
CONFIG_FILE_MODE = 0o600

LOG_LEVEL_ENV = "NTFY_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ENV_URL = "NTFY_URL"
ENV_USER = "NTFY_USER"
ENV_PASSWORD = "NTFY_PASSWORD"
ENV_TOPIC = "NTFY_TOPIC"
ENV_PREFIX = "NTFY_"
ENV_FILE_PARTS = (".claude", ".env")
ENV_DEFAULT_TOPIC = "notifications"
FALLBACK_PROFILE_NAME = "default"
ALL_TOPIC_ALIAS = "FAST-all"

HTTP_TIMEOUT_SECONDS = 30
HTTP_RETRIES = 2
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

DEFAULT_PRIORITY = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 5
DEFAULT_SINCE = "1h"

DEFAULT_WATCH_INTERVAL_SECONDS = 60
DEFAULT_PRIORITY_THRESHOLD = 1
PLAYBACK_TIMEOUT_SECONDS = 15

MAX_PREVIEWS_PER_TOPIC = 5
PREVIEW_LENGTH = 60
MESSAGE_ID_DISPLAY_LENGTH = 8

EXIT_RUNTIME_ERROR = 1
EXIT_USAGE_ERROR = 2

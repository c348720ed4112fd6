"""Per-topic read state persistence."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from ntfy_cli.shared.converters import to_int
from ntfy_cli.shared.paths import state_path
from ntfy_cli.shared.storage import load_json, save_json_atomic

logger = logging.getLogger(__name__)


def build_default_state() -> dict[str, Any]:
    """
    Build an empty read-state payload.

    Returns:
        State with no tracked topics.
    """
    return {"topics": {}}


def get_state_key(profile_name: str, topic: str) -> str:
    """
    Build the compound key for a profile and topic.

    Args:
        profile_name: Profile name.
        topic: Topic name.

    Returns:
        Key in "profile/topic" form.
    """
    return f"{profile_name}/{topic}"


def normalize_state(payload: Any) -> dict[str, Any] | None:
    """
    Validate the shape of a loaded state payload.

    Args:
        payload: Decoded JSON payload.

    Returns:
        Normalized state, or None when the payload has the wrong shape.
    """
    if not isinstance(payload, dict):
        return None
    topics = payload.get("topics", {})
    if not isinstance(topics, dict):
        return None
    normalized: dict[str, dict[str, int]] = {}
    for key, entry in topics.items():
        if not isinstance(entry, dict):
            continue
        last_read = to_int(entry.get("lastReadTime"))
        if last_read is not None:
            normalized[str(key)] = {"lastReadTime": last_read}
    return {**payload, "topics": normalized}


def load_state(path: Path | None = None) -> dict[str, Any]:
    """
    Load read state from disk.

    A missing file yields an empty state. A corrupt file is reported and
    treated as empty.

    Args:
        path: State file path, defaults to the config directory.

    Returns:
        Read-state dictionary.
    """
    path = path or state_path()
    try:
        payload = load_json(path, None)
    except (OSError, ValueError) as error:
        logger.warning("Ignoring unreadable state file %s: %s", path, error)
        return build_default_state()
    if payload is None:
        return build_default_state()
    state = normalize_state(payload)
    if state is None:
        logger.warning("Ignoring state file %s: unexpected structure", path)
        return build_default_state()
    return state


def save_state(state: dict[str, Any], path: Path | None = None) -> None:
    """
    Write read state atomically.

    Args:
        state: Read-state dictionary.
        path: State file path, defaults to the config directory.

    Returns:
        None.
    """
    save_json_atomic(path or state_path(), state)


def get_last_read_time(state: dict[str, Any], profile_name: str, topic: str) -> int:
    """
    Return the last-read timestamp for a profile and topic.

    Args:
        state: Read-state dictionary.
        profile_name: Profile name.
        topic: Topic name.

    Returns:
        Unix timestamp, or 0 when never read.
    """
    entry = state.get("topics", {}).get(get_state_key(profile_name, topic))
    if not isinstance(entry, dict):
        return 0
    return to_int(entry.get("lastReadTime")) or 0


def set_last_read_time(
    state: dict[str, Any],
    profile_name: str,
    topic: str,
    timestamp: int | None = None,
) -> dict[str, Any]:
    """
    Return a copy of the state with one topic's last-read time updated.

    Args:
        state: Read-state dictionary; not modified.
        profile_name: Profile name.
        topic: Topic name.
        timestamp: Unix timestamp, defaults to now.

    Returns:
        Updated read-state dictionary.
    """
    value = int(time.time()) if timestamp is None else int(timestamp)
    topics = dict(state.get("topics", {}))
    topics[get_state_key(profile_name, topic)] = {"lastReadTime": value}
    return {**state, "topics": topics}

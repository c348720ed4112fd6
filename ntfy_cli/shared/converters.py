"""Shared conversion helpers for client modules."""

from __future__ import annotations

from typing import Any

from ntfy_cli.shared.constants import MAX_PRIORITY, MIN_PRIORITY

PRIORITY_NAMES = {
    "min": 1,
    "minimum": 1,
    "low": 2,
    "default": 3,
    "normal": 3,
    "high": 4,
    "urgent": 5,
    "max": 5,
    "maximum": 5,
}


def to_int(value: Any) -> int | None:
    """
    Convert a value to an integer.

    Args:
        value: Input value.

    Returns:
        Parsed integer when valid, otherwise None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_text(value: Any) -> str:
    """
    Convert a value to stripped text.

    Args:
        value: Input value.

    Returns:
        Stripped string, empty when value is None.
    """
    if value is None:
        return ""
    return str(value).strip()


def to_string_list(value: Any) -> list[str]:
    """
    Normalize a list-like value into unique non-empty strings.

    Args:
        value: Input value.

    Returns:
        Normalized string list in first-seen order.
    """
    if not isinstance(value, list):
        return []
    normalized: list[str] = []
    for item in value:
        text = str(item).strip()
        if text and text not in normalized:
            normalized.append(text)
    return normalized


def parse_priority(value: str | None) -> int | None:
    """
    Parse a priority given as a number or a level name.

    Args:
        value: Raw priority such as "4" or "high".

    Returns:
        Priority between 1 and 5, or None when unrecognised.
    """
    text = (value or "").strip().lower()
    if not text:
        return None
    if text in PRIORITY_NAMES:
        return PRIORITY_NAMES[text]
    if not text.isdigit():
        return None
    parsed = int(text)
    if MIN_PRIORITY <= parsed <= MAX_PRIORITY:
        return parsed
    return None


def pluralize(count: int, noun: str) -> str:
    """Return "<count> <noun>" with a trailing s unless count is one."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def truncate_text(value: str | None, max_length: int) -> str:
    """
    Truncate text to a target maximum length.

    Args:
        value: Source text.
        max_length: Maximum length.

    Returns:
        Truncated text.
    """
    text = (value or "").strip()
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "…"

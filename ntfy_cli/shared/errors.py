"""Exception types shared by client modules."""

from __future__ import annotations


class NtfyError(RuntimeError):
    """Request to the ntfy server failed."""


class ConfigError(ValueError):
    """Profile configuration is missing or invalid."""


class UsageError(ValueError):
    """Command-line input is invalid."""

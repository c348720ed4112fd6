"""Command-line client for ntfy push notifications."""

__version__ = "0.1.0"

"""ntfy server integration utilities."""

from ntfy_cli.client.models import HealthStatus, Message, SendOptions
from ntfy_cli.client.ntfy import NtfyClient, auth_header

__all__ = ["NtfyClient", "Message", "HealthStatus", "SendOptions", "auth_header"]
